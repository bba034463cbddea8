"""Use case for the XP ledger."""

from datetime import date, timedelta, tzinfo
from typing import assert_never

from progression.application.common.clock import Clock
from progression.application.common.invalidation import stats_tag, tags
from progression.application.common.unit_of_work import UnitOfWork
from progression.application.gamification.dtos import DailyXp, XpCredit
from progression.application.gamification.messages import (
    CreditXp,
    GetDailyXp,
    GetTotalXp,
    GetWeeklyXp,
    GetXpHistory,
    XpRequest,
)
from progression.application.gamification.services.xp_service import XpService
from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, UserId, local_day
from progression.domain.gamification.entities.xp_transaction import XpSource

MAX_HISTORY_DAYS = 365


class XpUseCase:
    """Handles XpRequest messages."""

    def __init__(self, xp_service: XpService, uow: UnitOfWork, clock: Clock, tz: tzinfo) -> None:
        self.xp_service = xp_service
        self.uow = uow
        self.clock = clock
        self.tz = tz

    def handle(self, message: XpRequest) -> XpCredit | int | list[DailyXp]:
        user_id = UserId(message.user_id)

        match message:
            case CreditXp():
                return self._credit(user_id, message)
            case GetTotalXp():
                return self.xp_service.total(user_id)
            case GetDailyXp(day=day):
                return self.xp_service.for_days(user_id, day or self._today(), 1)
            case GetWeeklyXp(week_start=week_start):
                if week_start is None:
                    today = self._today()
                    week_start = today - timedelta(days=today.weekday())
                return self.xp_service.for_days(user_id, week_start, 7)
            case GetXpHistory(days=days):
                if not 1 <= days <= MAX_HISTORY_DAYS:
                    raise ValidationError(
                        f"days must be between 1 and {MAX_HISTORY_DAYS}", "days", days
                    )
                return self.xp_service.history(user_id, self._today(), days)
            case _:
                assert_never(message)

    def _credit(self, user_id: UserId, message: CreditXp) -> XpCredit:
        try:
            source = XpSource(message.source)
        except ValueError as e:
            raise ValidationError("Unknown XP source", "source", message.source) from e
        path_id = NodeId(message.path_id) if message.path_id is not None else None

        with self.uow:
            transaction = self.xp_service.credit(
                user_id=user_id,
                amount=message.amount,
                source=source,
                now=self.clock.now(),
                source_id=message.source_id,
                path_id=path_id,
            )
            total = self.xp_service.total(user_id)
            self.uow.commit()
        return XpCredit(transaction=transaction, total_xp=total, invalidates=tags(stats_tag(user_id.value)))

    def _today(self) -> date:
        return local_day(self.clock.now(), self.tz)
