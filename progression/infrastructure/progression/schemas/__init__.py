from .unlock_schemas import NextLessonResponse, UnlockStatusResponse

__all__ = ["NextLessonResponse", "UnlockStatusResponse"]
