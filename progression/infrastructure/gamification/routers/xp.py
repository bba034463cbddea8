"""API routes for XP stats, history and admin grants."""

import logging

from fastapi import APIRouter, HTTPException, Query, Response, status

from progression.application.gamification.dtos import DailyXp, XpCredit
from progression.application.gamification.messages import (
    CreditXp,
    GetCurrentStreak,
    GetDailyXp,
    GetTotalXp,
    GetWeeklyXp,
    GetXpHistory,
)
from progression.domain.gamification.entities.xp_transaction import XpSource
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import (
    EngineHTTPError,
    set_invalidation_header,
    unwrap_or_raise,
)
from progression.infrastructure.gamification.schemas import (
    DailyXpResponse,
    XpGrantRequest,
    XpGrantResponse,
    XpHistoryResponse,
    XpStatsResponse,
)
from progression.infrastructure.identity.dependencies import AdminIdentity, CurrentIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/xp", tags=["xp"])


@router.get("/stats", response_model=XpStatsResponse, status_code=status.HTTP_200_OK)
def get_xp_stats(identity: CurrentIdentity, bus: MessageBusDep) -> XpStatsResponse:
    """
    Get the current user's XP totals.

    Daily and weekly amounts use the streak timezone; the week starts on Monday.
    """
    user_id = identity.user_id
    total = unwrap_or_raise(bus.dispatch(GetTotalXp(user_id=user_id)))
    daily = unwrap_or_raise(bus.dispatch(GetDailyXp(user_id=user_id)))
    weekly = unwrap_or_raise(bus.dispatch(GetWeeklyXp(user_id=user_id)))
    streak = unwrap_or_raise(bus.dispatch(GetCurrentStreak(user_id=user_id)))
    return XpStatsResponse(
        total_xp=total,
        daily_xp=daily,
        weekly_xp=weekly,
        current_streak=streak,
    )


@router.get("/history", response_model=XpHistoryResponse, status_code=status.HTTP_200_OK)
def get_xp_history(
    identity: CurrentIdentity,
    bus: MessageBusDep,
    days: int = Query(7, description="Number of days to return, ending today"),
) -> XpHistoryResponse:
    history: list[DailyXp] = unwrap_or_raise(
        bus.dispatch(GetXpHistory(user_id=identity.user_id, days=days))
    )
    return XpHistoryResponse(
        days=[DailyXpResponse(day=entry.day, amount=entry.amount) for entry in history]
    )


@router.post("/grants", response_model=XpGrantResponse, status_code=status.HTTP_201_CREATED)
def grant_xp(
    request: XpGrantRequest,
    response: Response,
    admin: AdminIdentity,
    bus: MessageBusDep,
) -> XpGrantResponse:
    """
    Grant XP to a user. Admin only.

    Raises:
        HTTPException: 403 for non-admin callers, 500 if the grant fails unexpectedly
    """
    try:
        credit: XpCredit = unwrap_or_raise(
            bus.dispatch(
                CreditXp(
                    user_id=request.user_id,
                    amount=request.amount,
                    source=XpSource.ADMIN_GRANT.value,
                    path_id=request.path_id,
                )
            )
        )
        set_invalidation_header(response, credit.invalidates)
        logger.info(
            f"Admin {admin.user_id} granted {request.amount} XP to user {request.user_id}"
        )
        return XpGrantResponse(
            transaction_id=credit.transaction.id.value,
            user_id=credit.transaction.user_id.value,
            amount=credit.transaction.amount,
            source=credit.transaction.source.value,
            occurred_at=credit.transaction.occurred_at,
            total_xp=credit.total_xp,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to grant XP to user {request.user_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
