"""Protocol for review record persistence."""

from datetime import datetime
from typing import Protocol

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId
from progression.domain.review.entities.review_record import ReviewRecord


class ReviewRepositoryProtocol(Protocol):
    def add(self, record: ReviewRecord) -> ReviewRecord:
        """Append a record. Records are never updated."""
        ...

    def get(self, record_id: ReviewRecordId) -> ReviewRecord | None: ...

    def latest_for_card(self, user_id: UserId, flashcard_id: NodeId) -> ReviewRecord | None:
        """Most recent record, by review_date then id."""
        ...

    def outcomes_since(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        since: datetime,
        after_review_id: ReviewRecordId | None,
        limit: int,
    ) -> list[bool]:
        """
        ``is_correct`` of up to ``limit`` records made after the cutoff,
        newest first.

        The cutoff is ``since``. Records sharing that timestamp count only
        when their id is greater than ``after_review_id``; with no
        ``after_review_id`` they all count.
        """
        ...

    def due_cards(self, user_id: UserId, now: datetime, limit: int) -> list[ReviewRecord]:
        """
        Latest record per card where next_review_date <= now.

        Returns:
            Records ordered most overdue first, then by flashcard id
        """
        ...
