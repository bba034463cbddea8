"""Use case for daily streaks."""

from typing import assert_never

import structlog

from progression.application.common.clock import Clock
from progression.application.gamification.messages import (
    GetCurrentStreak,
    StreakRequest,
    UpdateStreak,
)
from progression.application.gamification.services.streak_service import StreakService
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.gamification.services.streak_calculator import StreakSummary

logger = structlog.get_logger(__name__)


class StreakUseCase:
    """Handles StreakRequest messages. Streaks are derived, never stored."""

    def __init__(self, streak_service: StreakService, clock: Clock) -> None:
        self.streak_service = streak_service
        self.clock = clock

    def handle(self, message: StreakRequest) -> int | StreakSummary:
        user_id = UserId(message.user_id)
        now = self.clock.now()

        match message:
            case GetCurrentStreak():
                return self.streak_service.summary(user_id, now).count
            case UpdateStreak(path_id=path_id):
                if path_id is not None:
                    NodeId(path_id)
                summary = self.streak_service.summary(user_id, now)
                logger.info(
                    "streak_updated",
                    user_id=user_id.value,
                    path_id=path_id,
                    streak=summary.count,
                    is_milestone=summary.is_milestone,
                )
                return summary
            case _:
                assert_never(message)
