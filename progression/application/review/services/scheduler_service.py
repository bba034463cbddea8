"""Spaced repetition scheduling against stored review history."""

from datetime import datetime

import structlog

from progression.application.review.protocols.review_repository import ReviewRepositoryProtocol
from progression.application.review.protocols.struggling_repository import (
    StrugglingRepositoryProtocol,
)
from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord
from progression.domain.review.entities.struggling_entry import StrugglingEntry
from progression.domain.review.services.spaced_repetition import SchedulingPolicy

logger = structlog.get_logger(__name__)


def parse_review_mode(value: str) -> ReviewMode:
    try:
        return ReviewMode(value)
    except ValueError as e:
        raise ValidationError(
            f"Unknown review mode, expected one of {[mode.value for mode in ReviewMode]}",
            "mode",
            value,
        ) from e


class SchedulerService:
    """Runs inside the caller's unit of work."""

    def __init__(
        self,
        review_repository: ReviewRepositoryProtocol,
        struggling_repository: StrugglingRepositoryProtocol,
        policy: SchedulingPolicy,
    ) -> None:
        self.review_repository = review_repository
        self.struggling_repository = struggling_repository
        self.policy = policy

    def record_outcome(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        is_correct: bool,
        mode: ReviewMode,
        now: datetime,
    ) -> ReviewRecord:
        """
        Append a review record with the next interval, and keep the
        struggling queue in step with the outcome.

        Args:
            user_id: The reviewing user
            flashcard_id: Reviewed card
            is_correct: Whether the answer was right
            mode: Review mode the answer was given in
            now: Review time

        Returns:
            The persisted review record
        """
        previous = self.review_repository.latest_for_card(user_id, flashcard_id)
        record = self.review_repository.add(
            self.policy.schedule(user_id, flashcard_id, mode, is_correct, previous, now)
        )

        if not is_correct:
            entry = self.struggling_repository.record_failure(
                user_id, flashcard_id, now, anchor_review_id=record.id
            )
            logger.info(
                "card_marked_struggling",
                user_id=user_id.value,
                flashcard_id=flashcard_id.value,
                times_failed=entry.times_failed,
            )
        else:
            self._maybe_leave_struggling(user_id, flashcard_id)

        logger.info(
            "review_recorded",
            user_id=user_id.value,
            flashcard_id=flashcard_id.value,
            is_correct=is_correct,
            interval_days=record.interval_days,
        )
        return record

    def _maybe_leave_struggling(self, user_id: UserId, flashcard_id: NodeId) -> None:
        entry = self.struggling_repository.find(user_id, flashcard_id)
        if entry is None:
            return
        outcomes = self.review_repository.outcomes_since(
            user_id,
            flashcard_id,
            entry.last_failed_at,
            entry.anchor_review_id,
            self.policy.struggling_exit_streak,
        )
        if self.policy.leaves_struggling(outcomes):
            self.struggling_repository.remove(user_id, flashcard_id)
            logger.info(
                "card_left_struggling",
                user_id=user_id.value,
                flashcard_id=flashcard_id.value,
            )

    def due_cards(self, user_id: UserId, now: datetime, limit: int) -> list[ReviewRecord]:
        return self.review_repository.due_cards(user_id, now, limit)

    def struggling_cards(self, user_id: UserId, limit: int) -> list[StrugglingEntry]:
        return self.struggling_repository.list_for_user(user_id, limit)

    def mark_struggling(self, user_id: UserId, flashcard_id: NodeId, now: datetime) -> StrugglingEntry:
        """Queue a card by hand. Reviews made before this call don't count towards leaving."""
        latest = self.review_repository.latest_for_card(user_id, flashcard_id)
        return self.struggling_repository.record_failure(
            user_id, flashcard_id, now, anchor_review_id=latest.id if latest else None
        )

    def unmark_struggling(self, user_id: UserId, flashcard_id: NodeId) -> bool:
        return self.struggling_repository.remove(user_id, flashcard_id)
