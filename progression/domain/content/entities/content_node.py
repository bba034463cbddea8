"""
ContentNode entity: one node of the read-only learning hierarchy.
"""

from dataclasses import dataclass
from enum import StrEnum

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import InvariantViolationError
from progression.domain.common.value_objects import NodeId


class NodeKind(StrEnum):
    """Levels of the hierarchy, root first."""

    DOMAIN = "domain"
    PATH = "path"
    UNIT = "unit"
    LESSON = "lesson"
    FLASHCARD = "flashcard"

    @property
    def parent_kind(self) -> "NodeKind | None":
        order = list(NodeKind)
        index = order.index(self)
        return order[index - 1] if index > 0 else None

    @property
    def child_kind(self) -> "NodeKind | None":
        order = list(NodeKind)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


class UnlockRequirement(StrEnum):
    """Extra condition a path can put on entry, on top of the sibling order."""

    NONE = "none"
    # unlock_requirement_value holds the id of the path to finish first
    PREVIOUS_PATH = "previous_path"
    # unlock_requirement_value holds the total XP needed
    XP_THRESHOLD = "xp_threshold"
    ADMIN_APPROVAL = "admin_approval"


@dataclass
class ContentNode(Entity[NodeId]):
    """
    A node of the Domain -> Path -> Unit -> Lesson -> Flashcard tree.

    Owned by the content-authoring subsystem; the engine only reads it.
    Ordinal positions are dense and unique within a parent, starting at 0.
    """

    id: NodeId
    parent_id: NodeId | None
    kind: NodeKind
    ordinal_position: int
    title: str = ""

    # Lesson metadata
    xp_reward: int | None = None

    # Path metadata
    is_locked: bool = False
    unlock_requirement_type: UnlockRequirement | None = None
    unlock_requirement_value: int | None = None

    # Flashcard metadata
    question: str | None = None
    answer: str | None = None
    difficulty: str | None = None

    def __post_init__(self) -> None:
        if self.ordinal_position < 0:
            raise InvariantViolationError("ContentNode", "ordinal_position must be >= 0")

    @property
    def is_root(self) -> bool:
        """Domains sit at the top of the tree and have no parent."""
        return self.kind is NodeKind.DOMAIN

    @property
    def is_first_child(self) -> bool:
        return self.ordinal_position == 0
