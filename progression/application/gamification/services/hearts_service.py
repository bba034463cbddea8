"""Hearts operations that run inside the caller's unit of work."""

from datetime import datetime, timedelta

import structlog

from progression.application.common.invalidation import hearts_tag, tags
from progression.application.gamification.dtos import HeartsStatus
from progression.application.gamification.protocols.hearts_repository import (
    HeartsRepositoryProtocol,
)
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.gamification.entities.hearts_state import HeartsState

logger = structlog.get_logger(__name__)


class HeartsService:
    def __init__(
        self,
        hearts_repository: HeartsRepositoryProtocol,
        max_hearts: int,
        regen_interval: timedelta,
    ) -> None:
        self.hearts_repository = hearts_repository
        self.max_hearts = max_hearts
        self.regen_interval = regen_interval

    def current(self, user_id: UserId, path_id: NodeId, now: datetime) -> HeartsStatus:
        """Regenerated view of the hearts. Written back only if hearts were gained."""
        state = self._load(user_id, path_id, now)
        if state.regenerate(now, self.regen_interval):
            state = self.hearts_repository.save(state)
        return self._status(state)

    def debit(self, user_id: UserId, path_id: NodeId, now: datetime) -> HeartsStatus:
        """
        Take one heart.

        Raises:
            InsufficientHeartsError: If none are left after regeneration
            ConcurrencyConflictError: If the row changed under us
        """
        state = self._load(user_id, path_id, now)
        state.debit(now, self.regen_interval)
        state = self.hearts_repository.save(state)
        logger.info(
            "hearts_debited",
            user_id=user_id.value,
            path_id=path_id.value,
            hearts_remaining=state.hearts_remaining,
        )
        return self._status(state, tags(hearts_tag(user_id.value, path_id.value)))

    def refill(self, user_id: UserId, path_id: NodeId, now: datetime) -> tuple[HeartsStatus, int]:
        """Reset to full. Returns the new status and the hearts held before."""
        state = self._load(user_id, path_id, now)
        state.regenerate(now, self.regen_interval)
        before = state.hearts_remaining
        restored = state.refill(now)
        state = self.hearts_repository.save(state)
        logger.info(
            "hearts_refilled",
            user_id=user_id.value,
            path_id=path_id.value,
            hearts_restored=restored,
        )
        return self._status(state, tags(hearts_tag(user_id.value, path_id.value))), before

    def _load(self, user_id: UserId, path_id: NodeId, now: datetime) -> HeartsState:
        return self.hearts_repository.get_or_create(
            user_id, path_id, self.max_hearts, now, for_update=True
        )

    def _status(self, state: HeartsState, invalidates: frozenset[str] = frozenset()) -> HeartsStatus:
        return HeartsStatus.from_state(state, state.next_heart_at(self.regen_interval), invalidates)
