"""Pydantic schemas for the review API."""

from datetime import datetime

from pydantic import BaseModel, Field


class DueCardResponse(BaseModel):
    """Schema for a card whose review is due."""

    flashcard_id: int
    last_review_id: int
    last_reviewed_at: datetime
    next_review_date: datetime
    interval_days: int


class DueCardsResponse(BaseModel):
    """Schema for due cards, most overdue first."""

    cards: list[DueCardResponse]


class StrugglingCardResponse(BaseModel):
    """Schema for a card in the struggling queue."""

    flashcard_id: int
    times_failed: int
    last_failed_at: datetime
    added_at: datetime


class StrugglingCardsResponse(BaseModel):
    """Schema for the struggling queue."""

    cards: list[StrugglingCardResponse]


class StrugglingRemoveResponse(BaseModel):
    """Schema for removing a card from the struggling queue."""

    success: bool = Field(..., description="Whether the removal was successful")
    removed: bool = Field(..., description="False if the card wasn't in the queue")


class ReviewSessionRequest(BaseModel):
    """Schema for starting a review session."""

    mode: str = Field("flashcard", description="Review mode: flashcard, quiz or recall")
    limit: int | None = Field(None, ge=1, description="Maximum number of cards")


class SessionCardResponse(BaseModel):
    """Schema for a card served in a review session."""

    flashcard_id: int
    question: str | None
    answer: str | None
    difficulty: str | None
    reason: str = Field(..., description="'due' or 'struggling'")


class ReviewSessionResponse(BaseModel):
    """Schema for a started review session."""

    session_id: str
    mode: str
    cards: list[SessionCardResponse]


class ReviewSubmitRequest(BaseModel):
    """Schema for submitting a review within a session."""

    flashcard_id: int = Field(..., gt=0)
    is_correct: bool
    mode: str = Field("flashcard", description="Review mode: flashcard, quiz or recall")


class ReviewSubmitResponse(BaseModel):
    """Schema for the outcome of a review."""

    review_id: int
    flashcard_id: int
    is_correct: bool
    interval_days: int
    next_review_date: datetime
    xp_awarded: int
    duplicate: bool = False
