"""Protocol for the struggling queue."""

from datetime import datetime
from typing import Protocol

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId
from progression.domain.review.entities.struggling_entry import StrugglingEntry


class StrugglingRepositoryProtocol(Protocol):
    def record_failure(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        now: datetime,
        anchor_review_id: ReviewRecordId | None = None,
    ) -> StrugglingEntry:
        """
        Add the card with times_failed = 1, or bump times_failed and
        last_failed_at if it's already queued. Atomic per (user, card).

        ``anchor_review_id`` replaces the stored anchor in both cases.
        """
        ...

    def find(self, user_id: UserId, flashcard_id: NodeId) -> StrugglingEntry | None: ...

    def remove(self, user_id: UserId, flashcard_id: NodeId) -> bool:
        """Returns True if an entry was deleted."""
        ...

    def list_for_user(self, user_id: UserId, limit: int) -> list[StrugglingEntry]:
        """Most failed first, then the longest-waiting."""
        ...
