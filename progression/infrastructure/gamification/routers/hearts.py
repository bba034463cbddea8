"""API routes for hearts on a path."""

from fastapi import APIRouter, Response, status

from progression.application.gamification.dtos import HeartsStatus, RefillOutcome
from progression.application.gamification.messages import GetHearts, RefillHearts
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import set_invalidation_header, unwrap_or_raise
from progression.infrastructure.gamification.schemas import HeartsRefillResponse, HeartsResponse
from progression.infrastructure.identity.dependencies import CurrentIdentity

router = APIRouter(prefix="/paths", tags=["hearts"])


def _to_response(hearts: HeartsStatus) -> HeartsResponse:
    return HeartsResponse(
        path_id=hearts.path_id,
        hearts_remaining=hearts.hearts_remaining,
        max_hearts=hearts.max_hearts,
        last_refill_at=hearts.last_refill_at,
        next_heart_at=hearts.next_heart_at,
    )


@router.get("/{path_id}/hearts", response_model=HeartsResponse, status_code=status.HTTP_200_OK)
def get_hearts(path_id: int, identity: CurrentIdentity, bus: MessageBusDep) -> HeartsResponse:
    """
    Get the current user's hearts on a path, after regeneration.

    A user who never played the path starts with full hearts.
    """
    hearts: HeartsStatus = unwrap_or_raise(
        bus.dispatch(GetHearts(user_id=identity.user_id, path_id=path_id))
    )
    return _to_response(hearts)


@router.post(
    "/{path_id}/hearts/refill",
    response_model=HeartsRefillResponse,
    status_code=status.HTTP_200_OK,
)
def refill_hearts(
    path_id: int, response: Response, identity: CurrentIdentity, bus: MessageBusDep
) -> HeartsRefillResponse:
    outcome: RefillOutcome = unwrap_or_raise(
        bus.dispatch(RefillHearts(user_id=identity.user_id, path_id=path_id))
    )
    set_invalidation_header(response, outcome.invalidates)
    return HeartsRefillResponse(
        hearts=_to_response(outcome.hearts), hearts_restored=outcome.hearts_restored
    )
