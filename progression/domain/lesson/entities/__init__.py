from .lesson_session import LessonSession, SessionStatus

__all__ = ["LessonSession", "SessionStatus"]
