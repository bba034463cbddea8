"""
Interval scheduling for flashcard reviews.

Correct answers stretch the interval geometrically, a wrong answer resets it
to one day. The first review of a card always starts at the initial interval.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord


@dataclass(frozen=True)
class SchedulingPolicy:
    growth_factor: float = 2.0
    max_interval_days: int = 365
    initial_interval_days: int = 1
    struggling_exit_streak: int = 2

    def __post_init__(self) -> None:
        if self.growth_factor < 1.0:
            raise ValidationError("growth_factor must be >= 1", "growth_factor", self.growth_factor)
        if self.initial_interval_days < 1 or self.max_interval_days < self.initial_interval_days:
            raise ValidationError("Invalid interval bounds", "max_interval_days", self.max_interval_days)
        if self.struggling_exit_streak < 1:
            raise ValidationError(
                "struggling_exit_streak must be >= 1",
                "struggling_exit_streak",
                self.struggling_exit_streak,
            )

    def next_interval(self, previous: ReviewRecord | None, is_correct: bool) -> int:
        if previous is None or not is_correct:
            return self.initial_interval_days
        grown = math.ceil(previous.interval_days * self.growth_factor)
        return min(max(grown, self.initial_interval_days), self.max_interval_days)

    def schedule(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        mode: ReviewMode,
        is_correct: bool,
        previous: ReviewRecord | None,
        now: datetime,
    ) -> ReviewRecord:
        """Build the review record for this attempt (not yet persisted)."""
        return ReviewRecord.create(
            user_id=user_id,
            flashcard_id=flashcard_id,
            review_mode=mode,
            is_correct=is_correct,
            review_date=now,
            interval_days=self.next_interval(previous, is_correct),
        )

    def leaves_struggling(self, recent_outcomes: Iterable[bool]) -> bool:
        """
        Whether the trailing run of correct answers is long enough to leave
        the struggling queue. ``recent_outcomes`` is newest first.
        """
        run = 0
        for outcome in recent_outcomes:
            if not outcome:
                break
            run += 1
            if run >= self.struggling_exit_streak:
                return True
        return False


def compose_session(
    due_ids: Iterable[NodeId], struggling_ids: Iterable[NodeId], limit: int
) -> list[NodeId]:
    """Due cards first, then struggling ones, without duplicates, capped at limit."""
    selected: list[NodeId] = []
    seen: set[NodeId] = set()
    for card_id in [*due_ids, *struggling_ids]:
        if len(selected) >= limit:
            break
        if card_id in seen:
            continue
        seen.add(card_id)
        selected.append(card_id)
    return selected
