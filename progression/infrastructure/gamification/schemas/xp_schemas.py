"""Pydantic schemas for XP API requests and responses."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class DailyXpResponse(BaseModel):
    """Schema for XP earned on one day."""

    day: date
    amount: int


class XpStatsResponse(BaseModel):
    """Schema for XP totals."""

    total_xp: int
    daily_xp: int
    weekly_xp: int
    current_streak: int


class XpHistoryResponse(BaseModel):
    """Schema for XP per day, oldest first."""

    days: list[DailyXpResponse] = Field(..., description="One entry per day, including empty days")


class XpGrantRequest(BaseModel):
    """Schema for an admin XP grant."""

    user_id: int = Field(..., gt=0, description="User receiving the XP")
    amount: int = Field(..., ge=0, description="XP to grant")
    path_id: int | None = Field(None, gt=0)


class XpGrantResponse(BaseModel):
    """Schema for the result of an XP grant."""

    transaction_id: int
    user_id: int
    amount: int
    source: str
    occurred_at: datetime
    total_xp: int
