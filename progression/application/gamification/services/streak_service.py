"""Streak computation over stored activity."""

from contextlib import closing
from datetime import datetime, tzinfo

from progression.application.gamification.protocols.activity_repository import (
    ActivityRepositoryProtocol,
)
from progression.domain.common.value_objects import UserId, local_day
from progression.domain.gamification.services.streak_calculator import (
    StreakSummary,
    summarize_streak,
)


class StreakService:
    def __init__(self, activity_repository: ActivityRepositoryProtocol, tz: tzinfo) -> None:
        self.activity_repository = activity_repository
        self.tz = tz

    def summary(self, user_id: UserId, now: datetime) -> StreakSummary:
        with closing(self.activity_repository.activity_days(user_id, self.tz, until=now)) as days:
            return summarize_streak(days, today=local_day(now, self.tz))
