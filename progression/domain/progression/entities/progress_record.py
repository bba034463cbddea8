"""
ProgressRecord entity: a user's completion fact for a lesson, unit or path.
"""

from dataclasses import dataclass
from datetime import datetime

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, ProgressRecordId, UserId, as_utc
from progression.domain.content.entities.content_node import NodeKind

TRACKED_KINDS = frozenset({NodeKind.LESSON, NodeKind.UNIT, NodeKind.PATH})


@dataclass
class ProgressRecord(Entity[ProgressRecordId]):
    """
    Completion of a node by a user.

    Business Rules:
    - One record per (user, node), created on first completion
    - Never deleted; re-attempts only raise the best score
    - Score is an accuracy percentage in 0..100
    """

    id: ProgressRecordId
    user_id: UserId
    node_id: NodeId
    node_kind: NodeKind
    score: int
    completed_at: datetime

    def __post_init__(self) -> None:
        if self.node_kind not in TRACKED_KINDS:
            raise ValidationError(
                "Progress is only tracked for lessons, units and paths",
                "node_kind",
                self.node_kind.value,
            )
        if not 0 <= self.score <= 100:
            raise ValidationError("Score must be between 0 and 100", "score", self.score)

    def improve(self, score: int) -> bool:
        """Keep the best score. Returns True if the score went up."""
        if score > self.score:
            self.score = score
            return True
        return False

    @classmethod
    def create(
        cls,
        user_id: UserId,
        node_id: NodeId,
        node_kind: NodeKind,
        score: int,
        completed_at: datetime,
    ) -> "ProgressRecord":
        """Create a new record (ID will be 0 until persisted)."""
        return cls(
            id=ProgressRecordId.generate(),
            user_id=user_id,
            node_id=node_id,
            node_kind=node_kind,
            score=score,
            completed_at=as_utc(completed_at),
        )
