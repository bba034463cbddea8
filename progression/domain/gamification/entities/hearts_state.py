"""
HeartsState entity: a per-user, per-path consumable that regenerates over time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import InsufficientHeartsError, InvariantViolationError
from progression.domain.common.value_objects import HeartsStateId, NodeId, UserId, as_utc


@dataclass
class HeartsState(Entity[HeartsStateId]):
    """
    Hearts for one (user, path).

    Regeneration is lazy: nothing ticks in the background. Every read or
    write first calls ``regenerate(now, interval)``, which converts the whole
    intervals elapsed since ``last_refill_at`` into hearts and keeps the
    partial remainder for next time.

    Business Rules:
    - 0 <= hearts_remaining <= max_hearts at all times
    - Debiting at zero fails with InsufficientHeartsError
    - When full, the regeneration timer is idle and restarts on the next debit
    """

    id: HeartsStateId
    user_id: UserId
    path_id: NodeId
    hearts_remaining: int
    max_hearts: int
    last_refill_at: datetime
    version: int = 0

    def __post_init__(self) -> None:
        if self.max_hearts < 1:
            raise InvariantViolationError("HeartsState", "max_hearts must be >= 1")
        if not 0 <= self.hearts_remaining <= self.max_hearts:
            raise InvariantViolationError(
                "HeartsState", "hearts_remaining must be between 0 and max_hearts"
            )
        self.last_refill_at = as_utc(self.last_refill_at)

    @property
    def is_full(self) -> bool:
        return self.hearts_remaining >= self.max_hearts

    @property
    def is_empty(self) -> bool:
        return self.hearts_remaining <= 0

    def regenerate(self, now: datetime, interval: timedelta) -> int:
        """
        Credit hearts for whole intervals elapsed since the last refill.

        Returns:
            Number of hearts actually gained
        """
        if self.is_full:
            return 0

        elapsed = as_utc(now) - self.last_refill_at
        if elapsed <= timedelta(0):
            # Clock skew: never regenerate backwards
            return 0

        intervals = elapsed // interval
        if intervals == 0:
            return 0

        before = self.hearts_remaining
        self.hearts_remaining = min(self.max_hearts, before + intervals)
        if self.is_full:
            self.last_refill_at = as_utc(now)
        else:
            self.last_refill_at = self.last_refill_at + intervals * interval
        return self.hearts_remaining - before

    def debit(self, now: datetime, interval: timedelta) -> None:
        """
        Consume one heart.

        Raises:
            InsufficientHeartsError: If no hearts are left after regeneration
        """
        self.regenerate(now, interval)
        if self.is_empty:
            raise InsufficientHeartsError(int(self.user_id), int(self.path_id))
        if self.is_full:
            self.last_refill_at = as_utc(now)
        self.hearts_remaining -= 1

    def refill(self, now: datetime) -> int:
        """Restore to max. Returns the number of hearts restored."""
        restored = self.max_hearts - self.hearts_remaining
        self.hearts_remaining = self.max_hearts
        self.last_refill_at = as_utc(now)
        return restored

    def next_heart_at(self, interval: timedelta) -> datetime | None:
        """When the next heart will regenerate, or None when full."""
        if self.is_full:
            return None
        return self.last_refill_at + interval

    @classmethod
    def start(
        cls, user_id: UserId, path_id: NodeId, max_hearts: int, now: datetime
    ) -> "HeartsState":
        """Fresh full state for a user entering a path for the first time."""
        return cls(
            id=HeartsStateId.generate(),
            user_id=user_id,
            path_id=path_id,
            hearts_remaining=max_hearts,
            max_hearts=max_hearts,
            last_refill_at=as_utc(now),
        )
