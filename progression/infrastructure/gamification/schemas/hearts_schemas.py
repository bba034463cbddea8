"""Pydantic schemas for hearts API responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class HeartsResponse(BaseModel):
    """Schema for a user's hearts on a path."""

    path_id: int
    hearts_remaining: int = Field(..., ge=0)
    max_hearts: int = Field(..., ge=1)
    last_refill_at: datetime
    next_heart_at: datetime | None = Field(None, description="When the next heart regenerates")


class HeartsRefillResponse(BaseModel):
    """Schema for a hearts refill."""

    hearts: HeartsResponse
    hearts_restored: int = Field(..., ge=0)
