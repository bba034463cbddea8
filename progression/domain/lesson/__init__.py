"""Lesson module domain layer."""

from .entities import LessonSession, SessionStatus

__all__ = ["LessonSession", "SessionStatus"]
