"""Pydantic schemas for unlock API responses."""

from pydantic import BaseModel, Field


class UnlockStatusResponse(BaseModel):
    """Schema for the unlock state of a lesson, unit or path."""

    node_id: int = Field(..., description="ID of the evaluated node")
    unlocked: bool = Field(..., description="Whether the user may enter the node")
    reason: str = Field(..., description="Why the node is locked or unlocked")


class NextLessonResponse(BaseModel):
    """Schema for the next lesson to take in a path."""

    path_id: int
    lesson_id: int | None = Field(None, description="Next lesson, or null if none is available")
    title: str | None = None
    unit_id: int | None = None
