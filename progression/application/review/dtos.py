"""Outcomes returned by the scheduler and review session use cases."""

from dataclasses import dataclass, field

from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord


@dataclass(frozen=True)
class SessionCard:
    flashcard_id: int
    question: str | None
    answer: str | None
    difficulty: str | None
    reason: str  # "due" or "struggling"


@dataclass(frozen=True)
class SessionHandle:
    session_id: str
    mode: ReviewMode
    cards: list[SessionCard]

    @property
    def is_empty(self) -> bool:
        return not self.cards


@dataclass(frozen=True)
class ReviewOutcome:
    review: ReviewRecord
    xp_awarded: int
    duplicate: bool = False
    invalidates: frozenset[str] = field(default_factory=frozenset)
