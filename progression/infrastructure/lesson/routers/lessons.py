"""API routes for lesson sessions: start, pause, resume, answer and complete."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from progression.application.lesson.dtos import (
    AnswerOutcome,
    CompletionOutcome,
    LessonCard,
    LessonFlashcards,
    LessonProgress,
    LessonSessionView,
    LessonStart,
    SessionChange,
)
from progression.application.lesson.messages import (
    AbandonLesson,
    CompleteLesson,
    GetLessonFlashcards,
    GetLessonProgress,
    PauseLesson,
    ResumeLesson,
    StartLesson,
    SubmitAnswer,
)
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import (
    EngineHTTPError,
    set_invalidation_header,
    unwrap_or_raise,
)
from progression.infrastructure.identity.dependencies import CurrentIdentity
from progression.infrastructure.lesson.schemas import (
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["lessons"])


def session_response(view: LessonSessionView) -> LessonSessionResponse:
    return LessonSessionResponse(
        session_id=view.session_id,
        lesson_id=view.lesson_id,
        path_id=view.path_id,
        status=view.status.value,
        current_flashcard_id=view.current_flashcard_id,
        answered_count=view.answered_count,
        correct_count=view.correct_count,
        total_count=view.total_count,
        progress_percent=view.progress_percent,
        accuracy=view.accuracy,
        started_at=view.started_at,
        last_activity_at=view.last_activity_at,
        paused_at=view.paused_at,
    )


def card_response(card: LessonCard) -> LessonCardResponse:
    return LessonCardResponse(
        flashcard_id=card.flashcard_id,
        question=card.question,
        answer=card.answer,
        difficulty=card.difficulty,
    )


def change_response(change: SessionChange) -> LessonSessionChangeResponse:
    return LessonSessionChangeResponse(session=session_response(change.session), changed=change.changed)


@router.post(
    "/{lesson_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_200_OK,
)
def submit_answer(
    lesson_id: int,
    request: AnswerSubmitRequest,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> AnswerResponse:
    """
    Record an answer given inside a lesson.

    A wrong answer costs a heart on the lesson's path.

    Args:
        lesson_id: ID of the lesson being taken
        request: The answered flashcard and its outcome

    Returns:
        The scheduled review with XP and hearts left

    Raises:
        EngineHTTPError: 403 if the lesson is locked, 409 if no hearts are left
        HTTPException: If recording fails unexpectedly
    """
    try:
        outcome: AnswerOutcome = unwrap_or_raise(
            bus.dispatch(
                SubmitAnswer(
                    user_id=identity.user_id,
                    lesson_id=lesson_id,
                    flashcard_id=request.flashcard_id,
                    is_correct=request.is_correct,
                    time_spent_seconds=request.time_spent_seconds,
                    session_id=request.session_id,
                )
            )
        )
        set_invalidation_header(response, outcome.invalidates)
        return AnswerResponse(
            review_id=outcome.review.id.value,
            flashcard_id=outcome.review.flashcard_id.value,
            is_correct=outcome.review.is_correct,
            interval_days=outcome.review.interval_days,
            next_review_date=outcome.review.next_review_date,
            xp_awarded=outcome.xp_awarded,
            hearts_remaining=outcome.hearts_remaining,
            path_id=outcome.path_id,
            duplicate=outcome.duplicate,
            session=session_response(outcome.session) if outcome.session else None,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to submit answer for lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{lesson_id}/complete",
    response_model=LessonCompletionResponse,
    status_code=status.HTTP_200_OK,
)
def complete_lesson(
    lesson_id: int,
    request: LessonCompleteRequest,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonCompletionResponse:
    """
    Complete a lesson, cascading completion to its unit and path.

    Raises:
        EngineHTTPError: 403 if the lesson is locked, 422 on inconsistent counts
        HTTPException: If completion fails unexpectedly
    """
    try:
        outcome: CompletionOutcome = unwrap_or_raise(
            bus.dispatch(
                CompleteLesson(
                    user_id=identity.user_id,
                    lesson_id=lesson_id,
                    correct_count=request.correct_count,
                    total_count=request.total_count,
                    time_spent_seconds=request.time_spent_seconds,
                    session_id=request.session_id,
                )
            )
        )
        set_invalidation_header(response, outcome.invalidates)
        return LessonCompletionResponse(
            lesson_id=outcome.lesson_id,
            score=outcome.score,
            best_score=outcome.best_score,
            first_completion=outcome.first_completion,
            xp_awarded=outcome.xp_awarded,
            streak=outcome.streak,
            streak_bonus=outcome.streak_bonus,
            unit_completed=outcome.unit_completed,
            path_completed=outcome.path_completed,
            newly_unlocked=outcome.newly_unlocked,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to complete lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{lesson_id}/start",
    response_model=LessonStartResponse,
    status_code=status.HTTP_201_CREATED,
)
def start_lesson(
    lesson_id: int,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonStartResponse:
    """
    Start a lesson session, or hand back the one already open.

    Args:
        lesson_id: ID of the lesson to start

    Returns:
        The session with its cards and the hearts left on the path

    Raises:
        EngineHTTPError: 403 if the lesson is locked, 422 if it has no flashcards
        HTTPException: If starting fails unexpectedly
    """
    try:
        outcome: LessonStart = unwrap_or_raise(
            bus.dispatch(StartLesson(user_id=identity.user_id, lesson_id=lesson_id))
        )
        set_invalidation_header(response, outcome.invalidates)
        return LessonStartResponse(
            session=session_response(outcome.session),
            cards=[card_response(card) for card in outcome.cards],
            hearts_remaining=outcome.hearts_remaining,
            review_mode=outcome.review_mode.value,
            existing=outcome.existing,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to start lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get(
    "/{lesson_id}/flashcards",
    response_model=LessonFlashcardsResponse,
    status_code=status.HTTP_200_OK,
)
def get_lesson_flashcards(
    lesson_id: int,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonFlashcardsResponse:
    """
    Get the flashcards of an unlocked lesson in order.

    Raises:
        EngineHTTPError: 403 if the lesson is locked, 404 if it doesn't exist
        HTTPException: If fetching fails unexpectedly
    """
    try:
        outcome: LessonFlashcards = unwrap_or_raise(
            bus.dispatch(GetLessonFlashcards(user_id=identity.user_id, lesson_id=lesson_id))
        )
        return LessonFlashcardsResponse(
            lesson_id=outcome.lesson_id,
            path_id=outcome.path_id,
            title=outcome.title,
            cards=[card_response(card) for card in outcome.cards],
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch flashcards for lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get(
    "/{lesson_id}/progress",
    response_model=LessonProgressResponse,
    status_code=status.HTTP_200_OK,
)
def get_lesson_progress(
    lesson_id: int,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonProgressResponse:
    """Get the user's unlock state, best score and current session for a lesson."""
    try:
        outcome: LessonProgress = unwrap_or_raise(
            bus.dispatch(GetLessonProgress(user_id=identity.user_id, lesson_id=lesson_id))
        )
        return LessonProgressResponse(
            lesson_id=outcome.lesson_id,
            path_id=outcome.path_id,
            unlocked=outcome.unlocked,
            reason=outcome.reason,
            completed=outcome.completed,
            best_score=outcome.best_score,
            completed_at=outcome.completed_at,
            session=session_response(outcome.session) if outcome.session else None,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch progress for lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{lesson_id}/pause",
    response_model=LessonSessionChangeResponse,
    status_code=status.HTTP_200_OK,
)
def pause_lesson(
    lesson_id: int,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonSessionChangeResponse:
    """
    Pause the open session of a lesson.

    Raises:
        EngineHTTPError: 404 if no session is open, 422 if it can't be paused
        HTTPException: If pausing fails unexpectedly
    """
    try:
        outcome: SessionChange = unwrap_or_raise(
            bus.dispatch(PauseLesson(user_id=identity.user_id, lesson_id=lesson_id))
        )
        set_invalidation_header(response, outcome.invalidates)
        return change_response(outcome)
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to pause lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/sessions/{session_id}/resume",
    response_model=LessonSessionChangeResponse,
    status_code=status.HTTP_200_OK,
)
def resume_lesson(
    session_id: str,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonSessionChangeResponse:
    """
    Resume a paused lesson session.

    Raises:
        EngineHTTPError: 403 for another user's session, 422 if it ended or expired
        HTTPException: If resuming fails unexpectedly
    """
    try:
        outcome: SessionChange = unwrap_or_raise(
            bus.dispatch(ResumeLesson(user_id=identity.user_id, session_id=session_id))
        )
        set_invalidation_header(response, outcome.invalidates)
        return change_response(outcome)
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to resume lesson session {session_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{lesson_id}/abandon",
    response_model=LessonSessionChangeResponse,
    status_code=status.HTTP_200_OK,
)
def abandon_lesson(
    lesson_id: int,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> LessonSessionChangeResponse:
    """
    Abandon the open session of a lesson. No XP is awarded and hearts stay spent.

    Raises:
        EngineHTTPError: 404 if no session is open
        HTTPException: If abandoning fails unexpectedly
    """
    try:
        outcome: SessionChange = unwrap_or_raise(
            bus.dispatch(AbandonLesson(user_id=identity.user_id, lesson_id=lesson_id))
        )
        set_invalidation_header(response, outcome.invalidates)
        return change_response(outcome)
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to abandon lesson {lesson_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
