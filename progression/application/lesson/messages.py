"""Lesson attempt messages."""

from dataclasses import dataclass

from progression.application.common.command import Command
from progression.application.common.query import Query


@dataclass(frozen=True)
class StartLesson(Command):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class GetLessonFlashcards(Query):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class GetLessonProgress(Query):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class PauseLesson(Command):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class ResumeLesson(Command):
    user_id: int
    session_id: str


@dataclass(frozen=True)
class AbandonLesson(Command):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class SubmitAnswer(Command):
    """
    Answer a card of a lesson.

    A ``session_id`` returned by StartLesson also advances that session.
    Any other ``session_id`` only makes retries idempotent.
    """

    user_id: int
    lesson_id: int
    flashcard_id: int
    is_correct: bool
    time_spent_seconds: int | None = None
    session_id: str | None = None


@dataclass(frozen=True)
class CompleteLesson(Command):
    """Counts come from the session when ``session_id`` is given, else they're required."""

    user_id: int
    lesson_id: int
    correct_count: int | None = None
    total_count: int | None = None
    time_spent_seconds: int | None = None
    session_id: str | None = None


LessonRequest = (
    StartLesson
    | GetLessonFlashcards
    | GetLessonProgress
    | PauseLesson
    | ResumeLesson
    | AbandonLesson
    | SubmitAnswer
    | CompleteLesson
)
