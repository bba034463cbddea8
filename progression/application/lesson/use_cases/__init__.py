from .lesson_use_case import LessonUseCase

__all__ = ["LessonUseCase"]
