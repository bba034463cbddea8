"""Pydantic schemas for streak API responses."""

from datetime import date

from pydantic import BaseModel, Field


class StreakResponse(BaseModel):
    """Schema for a user's daily streak."""

    current_streak: int = Field(..., ge=0, description="Consecutive active days")
    active_today: bool
    last_activity_day: date | None = None
    is_milestone: bool
    days_until_next_milestone: int
