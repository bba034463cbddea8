"""XP ledger operations that run inside the caller's unit of work."""

from datetime import date, datetime, timedelta, tzinfo

import structlog

from progression.application.gamification.dtos import DailyXp
from progression.application.gamification.protocols.xp_repository import XpRepositoryProtocol
from progression.domain.common.value_objects import NodeId, UserId, day_bounds, local_day
from progression.domain.gamification.entities.xp_transaction import XpSource, XpTransaction

logger = structlog.get_logger(__name__)


class XpService:
    def __init__(self, xp_repository: XpRepositoryProtocol, tz: tzinfo) -> None:
        self.xp_repository = xp_repository
        self.tz = tz

    def credit(
        self,
        user_id: UserId,
        amount: int,
        source: XpSource,
        now: datetime,
        source_id: int | None = None,
        path_id: NodeId | None = None,
    ) -> XpTransaction:
        """
        Append an XP transaction.

        Raises:
            ValidationError: If amount is negative
        """
        transaction = self.xp_repository.add(
            XpTransaction.create(
                user_id=user_id,
                amount=amount,
                source=source,
                occurred_at=now,
                source_id=source_id,
                path_id=path_id,
            )
        )
        logger.info(
            "xp_credited",
            user_id=user_id.value,
            amount=amount,
            source=source.value,
            source_id=source_id,
        )
        return transaction

    def total(self, user_id: UserId) -> int:
        return self.xp_repository.total(user_id)

    def for_days(self, user_id: UserId, first_day: date, days: int) -> int:
        start, end = day_bounds(first_day, self.tz, days)
        return self.xp_repository.sum_between(user_id, start, end)

    def history(self, user_id: UserId, last_day: date, days: int) -> list[DailyXp]:
        """Per-day totals for ``days`` days ending at ``last_day``, oldest first."""
        first_day = last_day - timedelta(days=days - 1)
        start, end = day_bounds(first_day, self.tz, days)
        totals = {first_day + timedelta(days=offset): 0 for offset in range(days)}
        for transaction in self.xp_repository.list_between(user_id, start, end):
            day = local_day(transaction.occurred_at, self.tz)
            if day in totals:
                totals[day] += transaction.amount
        return [DailyXp(day=day, amount=amount) for day, amount in totals.items()]

    def has_streak_bonus_on(self, user_id: UserId, day: date) -> bool:
        start, end = day_bounds(day, self.tz)
        return self.xp_repository.has_source_between(user_id, XpSource.STREAK_BONUS, start, end)
