from .lesson_schemas import (
    AnswerResponse,
    AnswerSubmitRequest,
    LessonCardResponse,
    LessonCompleteRequest,
    LessonCompletionResponse,
    LessonFlashcardsResponse,
    LessonProgressResponse,
    LessonSessionChangeResponse,
    LessonSessionResponse,
    LessonStartResponse,
)

__all__ = [
    "AnswerResponse",
    "AnswerSubmitRequest",
    "LessonCardResponse",
    "LessonCompleteRequest",
    "LessonCompletionResponse",
    "LessonFlashcardsResponse",
    "LessonProgressResponse",
    "LessonSessionChangeResponse",
    "LessonSessionResponse",
    "LessonStartResponse",
]
