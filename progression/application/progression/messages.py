"""Unlock messages."""

from dataclasses import dataclass

from progression.application.common.query import Query


@dataclass(frozen=True)
class IsLessonUnlocked(Query):
    user_id: int
    lesson_id: int


@dataclass(frozen=True)
class IsUnitUnlocked(Query):
    user_id: int
    unit_id: int


@dataclass(frozen=True)
class IsPathUnlocked(Query):
    user_id: int
    path_id: int


@dataclass(frozen=True)
class GetNextLesson(Query):
    """First unlocked, not yet completed lesson of a path."""

    user_id: int
    path_id: int


UnlockRequest = IsLessonUnlocked | IsUnitUnlocked | IsPathUnlocked | GetNextLesson
