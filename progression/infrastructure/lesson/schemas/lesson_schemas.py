"""Pydantic schemas for the lesson attempt API."""

from datetime import datetime

from pydantic import BaseModel, Field


class LessonCardResponse(BaseModel):
    flashcard_id: int
    question: str | None
    answer: str | None
    difficulty: str | None


class LessonSessionResponse(BaseModel):
    """Schema for the server-side state of a lesson attempt."""

    session_id: str
    lesson_id: int
    path_id: int
    status: str = Field(..., description="active, paused, finished, completed, failed or abandoned")
    current_flashcard_id: int | None = Field(
        None, description="Next card to answer, None once all are answered"
    )
    answered_count: int
    correct_count: int
    total_count: int
    progress_percent: int = Field(..., ge=0, le=100)
    accuracy: int = Field(..., ge=0, le=100)
    started_at: datetime
    last_activity_at: datetime
    paused_at: datetime | None = None


class LessonStartResponse(BaseModel):
    """Schema for a started (or handed back) lesson session."""

    session: LessonSessionResponse
    cards: list[LessonCardResponse]
    hearts_remaining: int
    review_mode: str
    existing: bool = Field(False, description="True when an open session was returned instead of a new one")


class LessonFlashcardsResponse(BaseModel):
    lesson_id: int
    path_id: int
    title: str
    cards: list[LessonCardResponse]


class LessonProgressResponse(BaseModel):
    """Schema for a user's standing on one lesson."""

    lesson_id: int
    path_id: int
    unlocked: bool
    reason: str
    completed: bool
    best_score: int | None = None
    completed_at: datetime | None = None
    session: LessonSessionResponse | None = None


class LessonSessionChangeResponse(BaseModel):
    session: LessonSessionResponse
    changed: bool = Field(..., description="False when the session was already in the requested state")


class AnswerSubmitRequest(BaseModel):
    """Schema for answering a flashcard inside a lesson."""

    flashcard_id: int = Field(..., gt=0, description="Flashcard being answered")
    is_correct: bool = Field(..., description="Whether the answer was correct")
    time_spent_seconds: int | None = Field(None, ge=0, description="Time spent on the question")
    session_id: str | None = Field(
        None,
        min_length=1,
        max_length=64,
        description="Lesson session id, or a client-generated key making retries idempotent",
    )


class AnswerResponse(BaseModel):
    """Schema for the outcome of a lesson answer."""

    review_id: int
    flashcard_id: int
    is_correct: bool
    interval_days: int
    next_review_date: datetime
    xp_awarded: int
    hearts_remaining: int | None
    path_id: int
    duplicate: bool = Field(False, description="True when this answer was already recorded")
    session: LessonSessionResponse | None = None


class LessonCompleteRequest(BaseModel):
    """Schema for completing a lesson, from a finished session or from client counts."""

    correct_count: int | None = Field(None, ge=0, description="Number of correct answers")
    total_count: int | None = Field(None, ge=1, description="Number of questions in the attempt")
    time_spent_seconds: int | None = Field(None, ge=0, description="Total time spent")
    session_id: str | None = Field(
        None,
        min_length=1,
        max_length=64,
        description="Lesson session whose answers make up the attempt",
    )


class LessonCompletionResponse(BaseModel):
    """Schema for the outcome of a lesson completion."""

    lesson_id: int
    score: int = Field(..., description="Score of this attempt, 0-100")
    best_score: int = Field(..., description="Best score recorded for the lesson")
    first_completion: bool
    xp_awarded: int
    streak: int
    streak_bonus: int
    unit_completed: bool
    path_completed: bool
    newly_unlocked: list[int] = Field(default_factory=list, description="Nodes unlocked by this completion")
