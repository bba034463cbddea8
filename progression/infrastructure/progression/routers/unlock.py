"""API routes for unlock state of lessons, units and paths."""

import logging

from fastapi import APIRouter, HTTPException, status

from progression.application.progression.messages import (
    GetNextLesson,
    IsLessonUnlocked,
    IsPathUnlocked,
    IsUnitUnlocked,
)
from progression.domain.content.entities.content_node import ContentNode
from progression.domain.progression.services.unlock_evaluator import UnlockDecision
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import EngineHTTPError, unwrap_or_raise
from progression.infrastructure.identity.dependencies import CurrentIdentity
from progression.infrastructure.progression.schemas import NextLessonResponse, UnlockStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["unlock"])


def _to_response(decision: UnlockDecision) -> UnlockStatusResponse:
    return UnlockStatusResponse(
        node_id=decision.node_id.value,
        unlocked=decision.unlocked,
        reason=decision.reason,
    )


@router.get(
    "/lessons/{lesson_id}/unlock",
    response_model=UnlockStatusResponse,
    status_code=status.HTTP_200_OK,
)
def get_lesson_unlock(
    lesson_id: int, identity: CurrentIdentity, bus: MessageBusDep
) -> UnlockStatusResponse:
    """
    Check whether a lesson is unlocked for the current user.

    Raises:
        EngineHTTPError: 404 if the lesson doesn't exist
    """
    decision = unwrap_or_raise(
        bus.dispatch(IsLessonUnlocked(user_id=identity.user_id, lesson_id=lesson_id))
    )
    return _to_response(decision)


@router.get(
    "/units/{unit_id}/unlock",
    response_model=UnlockStatusResponse,
    status_code=status.HTTP_200_OK,
)
def get_unit_unlock(unit_id: int, identity: CurrentIdentity, bus: MessageBusDep) -> UnlockStatusResponse:
    decision = unwrap_or_raise(bus.dispatch(IsUnitUnlocked(user_id=identity.user_id, unit_id=unit_id)))
    return _to_response(decision)


@router.get(
    "/paths/{path_id}/unlock",
    response_model=UnlockStatusResponse,
    status_code=status.HTTP_200_OK,
)
def get_path_unlock(path_id: int, identity: CurrentIdentity, bus: MessageBusDep) -> UnlockStatusResponse:
    decision = unwrap_or_raise(bus.dispatch(IsPathUnlocked(user_id=identity.user_id, path_id=path_id)))
    return _to_response(decision)


@router.get(
    "/paths/{path_id}/next-lesson",
    response_model=NextLessonResponse,
    status_code=status.HTTP_200_OK,
)
def get_next_lesson(path_id: int, identity: CurrentIdentity, bus: MessageBusDep) -> NextLessonResponse:
    """
    Get the first lesson of a path the user should take next.

    Returns a null lesson when every lesson is completed or the next one is locked.

    Raises:
        HTTPException: If the lookup fails unexpectedly
    """
    try:
        lesson: ContentNode | None = unwrap_or_raise(
            bus.dispatch(GetNextLesson(user_id=identity.user_id, path_id=path_id))
        )
        if lesson is None:
            return NextLessonResponse(path_id=path_id)
        return NextLessonResponse(
            path_id=path_id,
            lesson_id=lesson.id.value,
            title=lesson.title,
            unit_id=lesson.parent_id.value if lesson.parent_id else None,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to find next lesson of path {path_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
