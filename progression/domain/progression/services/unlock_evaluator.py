"""
Unlock rules for the learning hierarchy.

A node is reachable when the content before it has been finished:

- Domains are always unlocked.
- The first child of a parent inherits the parent's unlock state.
- Any other child needs its immediate predecessor sibling completed.
- Paths (and everything beneath them) also need the path access policy to
  allow the user.

The evaluator is pure: it reads through the lookups it is given and never
raises on broken hierarchy data. Orphans come back locked with an
``integrity_issue`` describing what is missing.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from progression.domain.common.exceptions import InvariantViolationError
from progression.domain.common.value_objects import NodeId
from progression.domain.content.entities.content_node import ContentNode, NodeKind


class HierarchyLookup(Protocol):
    def get_node(self, node_id: NodeId) -> ContentNode | None: ...

    def get_child_at(self, parent_id: NodeId, position: int) -> ContentNode | None: ...


@dataclass(frozen=True)
class UnlockDecision:
    """Result of an unlock check."""

    node_id: NodeId
    unlocked: bool
    reason: str
    integrity_issue: str | None = None


class UnlockEvaluator:
    """Evaluates unlock state for one user against a hierarchy snapshot."""

    def __init__(
        self,
        hierarchy: HierarchyLookup,
        is_completed: Callable[[NodeId], bool],
        path_access: Callable[[ContentNode], bool],
    ) -> None:
        self._hierarchy = hierarchy
        self._is_completed = is_completed
        self._path_access = path_access

    def evaluate(self, node: ContentNode) -> UnlockDecision:
        chain, issue = self._ancestry(node)
        if issue is not None:
            return UnlockDecision(node.id, False, "orphaned", issue)

        for ancestor in chain:
            if ancestor.kind is NodeKind.PATH and not self._path_access(ancestor):
                return UnlockDecision(node.id, False, "path_access_denied")

        # chain[-1] is the domain
        for current in chain[:-1]:
            if current.is_first_child:
                continue

            if current.parent_id is None:
                raise InvariantViolationError(
                    "ContentNode", f"{current.kind} {current.id} passed ancestry without a parent"
                )
            predecessor = self._hierarchy.get_child_at(
                current.parent_id, current.ordinal_position - 1
            )
            if predecessor is None:
                return UnlockDecision(
                    node.id,
                    False,
                    "orphaned",
                    f"{current.kind} {current.id} has no sibling at position "
                    f"{current.ordinal_position - 1}",
                )
            if self._is_completed(predecessor.id):
                return UnlockDecision(node.id, True, "predecessor_completed")
            return UnlockDecision(node.id, False, "predecessor_incomplete")

        return UnlockDecision(node.id, True, "root")

    def _ancestry(self, node: ContentNode) -> tuple[list[ContentNode], str | None]:
        """Walk from the node up to its domain."""
        chain = [node]
        current = node
        seen = {node.id}
        while not current.is_root:
            if current.parent_id is None:
                return chain, f"{current.kind} {current.id} has no parent"
            parent = self._hierarchy.get_node(current.parent_id)
            if parent is None:
                return chain, f"parent {current.parent_id} of {current.kind} {current.id} is missing"
            if parent.id in seen:
                return chain, f"cycle detected at node {parent.id}"
            seen.add(parent.id)
            chain.append(parent)
            current = parent
        return chain, None


def allow_unlocked_paths(path: ContentNode) -> bool:
    """Default path access policy: deny paths flagged as locked."""
    return not path.is_locked
