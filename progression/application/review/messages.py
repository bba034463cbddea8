"""Scheduler and review session messages."""

from dataclasses import dataclass

from progression.application.common.command import Command
from progression.application.common.query import Query

# Scheduler


@dataclass(frozen=True)
class GetDueCards(Query):
    user_id: int
    limit: int = 20


@dataclass(frozen=True)
class GetStrugglingCards(Query):
    user_id: int
    limit: int = 20


@dataclass(frozen=True)
class RecordOutcome(Command):
    user_id: int
    flashcard_id: int
    is_correct: bool
    mode: str = "flashcard"


@dataclass(frozen=True)
class AddToStrugglingQueue(Command):
    user_id: int
    flashcard_id: int


@dataclass(frozen=True)
class RemoveFromStrugglingQueue(Command):
    user_id: int
    flashcard_id: int


SchedulerRequest = (
    GetDueCards | GetStrugglingCards | RecordOutcome | AddToStrugglingQueue | RemoveFromStrugglingQueue
)

# Review sessions


@dataclass(frozen=True)
class StartReviewSession(Command):
    user_id: int
    mode: str = "flashcard"
    limit: int | None = None


@dataclass(frozen=True)
class SubmitReview(Command):
    user_id: int
    session_id: str
    flashcard_id: int
    is_correct: bool
    mode: str = "flashcard"


ReviewSessionRequest = StartReviewSession | SubmitReview
