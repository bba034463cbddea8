"""
ReviewRecord entity: one graded attempt at a flashcard.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId, as_utc


class ReviewMode(StrEnum):
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    RECALL = "recall"


@dataclass
class ReviewRecord(Entity[ReviewRecordId]):
    """
    An append-only review attempt.

    The most recent record for a (user, flashcard) pair carries the card's
    current interval and next due date.
    """

    id: ReviewRecordId
    user_id: UserId
    flashcard_id: NodeId
    review_mode: ReviewMode
    is_correct: bool
    review_date: datetime
    next_review_date: datetime
    interval_days: int

    def __post_init__(self) -> None:
        if self.interval_days < 1:
            raise ValidationError("interval_days must be >= 1", "interval_days", self.interval_days)
        self.review_date = as_utc(self.review_date)
        self.next_review_date = as_utc(self.next_review_date)

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date <= as_utc(now)

    def overdue_by(self, now: datetime) -> timedelta:
        return as_utc(now) - self.next_review_date

    @classmethod
    def create(
        cls,
        user_id: UserId,
        flashcard_id: NodeId,
        review_mode: ReviewMode,
        is_correct: bool,
        review_date: datetime,
        interval_days: int,
    ) -> "ReviewRecord":
        review_date = as_utc(review_date)
        return cls(
            id=ReviewRecordId.generate(),
            user_id=user_id,
            flashcard_id=flashcard_id,
            review_mode=review_mode,
            is_correct=is_correct,
            review_date=review_date,
            next_review_date=review_date + timedelta(days=interval_days),
            interval_days=interval_days,
        )
