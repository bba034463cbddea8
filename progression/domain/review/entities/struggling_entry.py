"""
StrugglingEntry entity: a flashcard a user keeps getting wrong.
"""

from dataclasses import dataclass
from datetime import datetime

from progression.domain.common.entity import Entity
from progression.domain.common.value_objects import (
    NodeId,
    ReviewRecordId,
    StrugglingEntryId,
    UserId,
    as_utc,
)


@dataclass
class StrugglingEntry(Entity[StrugglingEntryId]):
    """
    Membership of a card in a user's struggling queue.

    At most one entry per (user, flashcard). Repeated failures bump
    ``times_failed``; enough consecutive successes remove the entry.

    ``anchor_review_id`` is the card's latest review when the entry was
    last refreshed. Only reviews after it count towards leaving the queue.
    """

    id: StrugglingEntryId
    user_id: UserId
    flashcard_id: NodeId
    times_failed: int
    last_failed_at: datetime
    added_at: datetime
    anchor_review_id: ReviewRecordId | None = None

    def __post_init__(self) -> None:
        self.last_failed_at = as_utc(self.last_failed_at)
        self.added_at = as_utc(self.added_at)
