"""Use case for the hearts economy."""

from typing import assert_never

from progression.application.common.clock import Clock
from progression.application.common.unit_of_work import UnitOfWork
from progression.application.gamification.dtos import HeartsStatus, RefillOutcome
from progression.application.gamification.messages import (
    DebitHearts,
    GetHearts,
    HeartsRequest,
    RefillHearts,
)
from progression.application.gamification.services.hearts_service import HeartsService
from progression.domain.common.value_objects import NodeId, UserId


class HeartsUseCase:
    """Handles HeartsRequest messages."""

    def __init__(self, hearts_service: HeartsService, uow: UnitOfWork, clock: Clock) -> None:
        self.hearts_service = hearts_service
        self.uow = uow
        self.clock = clock

    def handle(self, message: HeartsRequest) -> HeartsStatus | RefillOutcome:
        user_id = UserId(message.user_id)
        path_id = NodeId(message.path_id)
        now = self.clock.now()

        with self.uow:
            result: HeartsStatus | RefillOutcome
            match message:
                case GetHearts():
                    result = self.hearts_service.current(user_id, path_id, now)
                case DebitHearts():
                    result = self.hearts_service.debit(user_id, path_id, now)
                case RefillHearts():
                    status, before = self.hearts_service.refill(user_id, path_id, now)
                    result = RefillOutcome(
                        hearts=status,
                        hearts_before=before,
                        hearts_restored=status.hearts_remaining - before,
                    )
                case _:
                    assert_never(message)
            self.uow.commit()
        return result
