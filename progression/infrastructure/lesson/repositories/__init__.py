from .lesson_session_repository import LessonSessionRepository

__all__ = ["LessonSessionRepository"]
