from .lesson_session_mapper import LessonSessionMapper

__all__ = ["LessonSessionMapper"]
