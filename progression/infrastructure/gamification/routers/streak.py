"""API route for the daily streak."""

from fastapi import APIRouter, status

from progression.application.gamification.messages import UpdateStreak
from progression.domain.gamification.services.streak_calculator import StreakSummary
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import unwrap_or_raise
from progression.infrastructure.gamification.schemas import StreakResponse
from progression.infrastructure.identity.dependencies import CurrentIdentity

router = APIRouter(prefix="/streak", tags=["streak"])


@router.get("", response_model=StreakResponse, status_code=status.HTTP_200_OK)
def get_streak(identity: CurrentIdentity, bus: MessageBusDep) -> StreakResponse:
    """Get the current user's streak, recomputed from their activity."""
    summary: StreakSummary = unwrap_or_raise(bus.dispatch(UpdateStreak(user_id=identity.user_id)))
    return StreakResponse(
        current_streak=summary.count,
        active_today=summary.active_today,
        last_activity_day=summary.last_activity_day,
        is_milestone=summary.is_milestone,
        days_until_next_milestone=summary.days_until_next_milestone,
    )
