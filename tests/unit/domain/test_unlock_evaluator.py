"""Tests for unlock rules over an in-memory hierarchy."""

import pytest

from progression.domain.common.value_objects import NodeId
from progression.domain.content.entities.content_node import ContentNode, NodeKind
from progression.domain.progression.services.unlock_evaluator import (
    UnlockEvaluator,
    allow_unlocked_paths,
)


class InMemoryHierarchy:
    def __init__(self, *nodes: ContentNode) -> None:
        self.nodes = {node.id: node for node in nodes}

    def get_node(self, node_id: NodeId) -> ContentNode | None:
        return self.nodes.get(node_id)

    def get_child_at(self, parent_id: NodeId, position: int) -> ContentNode | None:
        for node in self.nodes.values():
            if node.parent_id == parent_id and node.ordinal_position == position:
                return node
        return None


def node(node_id: int, kind: NodeKind, parent: int | None, position: int, **kwargs) -> ContentNode:
    return ContentNode(
        id=NodeId(node_id),
        parent_id=NodeId(parent) if parent is not None else None,
        kind=kind,
        ordinal_position=position,
        **kwargs,
    )


DOMAIN = node(1, NodeKind.DOMAIN, None, 0)
PATH_A = node(2, NodeKind.PATH, 1, 0)
PATH_B = node(3, NodeKind.PATH, 1, 1)
UNIT_1 = node(10, NodeKind.UNIT, 2, 0)
UNIT_2 = node(11, NodeKind.UNIT, 2, 1)
LESSON_1 = node(100, NodeKind.LESSON, 10, 0)
LESSON_2 = node(101, NodeKind.LESSON, 10, 1)
LESSON_3 = node(102, NodeKind.LESSON, 11, 0)


@pytest.fixture
def hierarchy() -> InMemoryHierarchy:
    return InMemoryHierarchy(DOMAIN, PATH_A, PATH_B, UNIT_1, UNIT_2, LESSON_1, LESSON_2, LESSON_3)


def evaluator(hierarchy, completed: set[int] = frozenset(), path_access=allow_unlocked_paths):
    return UnlockEvaluator(
        hierarchy=hierarchy,
        is_completed=lambda node_id: node_id.value in completed,
        path_access=path_access,
    )


class TestUnlockEvaluator:
    def test_domain_is_always_unlocked(self, hierarchy) -> None:
        decision = evaluator(hierarchy).evaluate(DOMAIN)
        assert decision.unlocked
        assert decision.reason == "root"

    def test_first_lesson_of_first_path_is_unlocked(self, hierarchy) -> None:
        assert evaluator(hierarchy).evaluate(LESSON_1).unlocked

    def test_second_lesson_needs_first_completed(self, hierarchy) -> None:
        locked = evaluator(hierarchy).evaluate(LESSON_2)
        assert not locked.unlocked
        assert locked.reason == "predecessor_incomplete"

        unlocked = evaluator(hierarchy, completed={100}).evaluate(LESSON_2)
        assert unlocked.unlocked
        assert unlocked.reason == "predecessor_completed"

    def test_first_lesson_of_second_unit_inherits_unit_state(self, hierarchy) -> None:
        assert not evaluator(hierarchy, completed={100, 101}).evaluate(LESSON_3).unlocked
        assert evaluator(hierarchy, completed={100, 101, 10}).evaluate(LESSON_3).unlocked

    def test_second_path_needs_first_path_completed(self, hierarchy) -> None:
        assert not evaluator(hierarchy).evaluate(PATH_B).unlocked
        assert evaluator(hierarchy, completed={2}).evaluate(PATH_B).unlocked

    def test_locked_path_denies_nodes_beneath_it(self) -> None:
        premium = node(4, NodeKind.PATH, 1, 0, is_locked=True)
        unit = node(20, NodeKind.UNIT, 4, 0)
        lesson = node(200, NodeKind.LESSON, 20, 0)
        hierarchy = InMemoryHierarchy(DOMAIN, premium, unit, lesson)

        decision = evaluator(hierarchy).evaluate(lesson)
        assert not decision.unlocked
        assert decision.reason == "path_access_denied"

    def test_custom_path_access_policy(self, hierarchy) -> None:
        decision = evaluator(hierarchy, path_access=lambda path: False).evaluate(LESSON_1)
        assert decision.reason == "path_access_denied"

    def test_missing_parent_is_orphaned(self) -> None:
        lesson = node(300, NodeKind.LESSON, 999, 0)
        decision = evaluator(InMemoryHierarchy(lesson)).evaluate(lesson)

        assert not decision.unlocked
        assert decision.reason == "orphaned"
        assert decision.integrity_issue is not None

    def test_parentless_later_sibling_is_orphaned_not_raised(self) -> None:
        lesson = node(301, NodeKind.LESSON, None, 2)
        decision = evaluator(InMemoryHierarchy(lesson)).evaluate(lesson)

        assert decision.reason == "orphaned"
        assert "has no parent" in decision.integrity_issue

    def test_missing_predecessor_is_orphaned(self) -> None:
        gap = node(103, NodeKind.LESSON, 10, 3)
        hierarchy = InMemoryHierarchy(DOMAIN, PATH_A, UNIT_1, LESSON_1, gap)

        decision = evaluator(hierarchy, completed={100}).evaluate(gap)
        assert decision.reason == "orphaned"

    def test_cycle_is_orphaned(self) -> None:
        a = node(50, NodeKind.UNIT, 51, 0)
        b = node(51, NodeKind.PATH, 50, 0)
        decision = evaluator(InMemoryHierarchy(a, b)).evaluate(a)
        assert decision.reason == "orphaned"
        assert "cycle" in decision.integrity_issue
