"""Outcomes of the lesson flow."""

from dataclasses import dataclass, field
from datetime import datetime

from progression.domain.content.entities.content_node import ContentNode
from progression.domain.lesson.entities.lesson_session import LessonSession, SessionStatus
from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord


@dataclass(frozen=True)
class LessonCard:
    flashcard_id: int
    question: str | None
    answer: str | None
    difficulty: str | None

    @classmethod
    def from_node(cls, node: ContentNode) -> "LessonCard":
        return cls(
            flashcard_id=node.id.value,
            question=node.question,
            answer=node.answer,
            difficulty=node.difficulty,
        )


@dataclass(frozen=True)
class LessonSessionView:
    session_id: str
    lesson_id: int
    path_id: int
    status: SessionStatus
    current_flashcard_id: int | None
    answered_count: int
    correct_count: int
    total_count: int
    progress_percent: int
    accuracy: int
    started_at: datetime
    last_activity_at: datetime
    paused_at: datetime | None

    @classmethod
    def from_session(cls, session: LessonSession) -> "LessonSessionView":
        current = session.current_card_id
        return cls(
            session_id=session.session_key,
            lesson_id=session.lesson_id.value,
            path_id=session.path_id.value,
            status=session.status,
            current_flashcard_id=current.value if current else None,
            answered_count=session.answered_count,
            correct_count=session.correct_count,
            total_count=session.total_count,
            progress_percent=session.progress_percent,
            accuracy=session.accuracy,
            started_at=session.started_at,
            last_activity_at=session.last_activity_at,
            paused_at=session.paused_at,
        )


@dataclass(frozen=True)
class LessonStart:
    session: LessonSessionView
    cards: list[LessonCard]
    hearts_remaining: int
    review_mode: ReviewMode
    # True when an open session was handed back instead of a new one
    existing: bool = False
    invalidates: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class LessonFlashcards:
    lesson_id: int
    path_id: int
    title: str
    cards: list[LessonCard]


@dataclass(frozen=True)
class LessonProgress:
    lesson_id: int
    path_id: int
    unlocked: bool
    reason: str
    completed: bool
    best_score: int | None
    completed_at: datetime | None
    session: LessonSessionView | None


@dataclass(frozen=True)
class SessionChange:
    """Pause, resume or abandon. ``changed`` is False for a repeated pause or resume."""

    session: LessonSessionView
    changed: bool
    invalidates: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AnswerOutcome:
    review: ReviewRecord
    xp_awarded: int
    hearts_remaining: int | None
    path_id: int
    duplicate: bool = False
    session: LessonSessionView | None = None
    invalidates: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CompletionOutcome:
    lesson_id: int
    score: int
    best_score: int
    first_completion: bool
    xp_awarded: int
    streak: int
    streak_bonus: int
    unit_completed: bool
    path_completed: bool
    newly_unlocked: list[int] = field(default_factory=list)
    invalidates: frozenset[str] = field(default_factory=frozenset)
