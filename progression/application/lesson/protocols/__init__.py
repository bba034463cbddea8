from .lesson_session_repository import LessonSessionRepositoryProtocol

__all__ = ["LessonSessionRepositoryProtocol"]
