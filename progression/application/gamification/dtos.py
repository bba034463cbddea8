"""Outcomes returned by the gamification use cases."""

from dataclasses import dataclass, field
from datetime import date, datetime

from progression.domain.gamification.entities.hearts_state import HeartsState
from progression.domain.gamification.entities.xp_transaction import XpTransaction


@dataclass(frozen=True)
class HeartsStatus:
    """Hearts for a (user, path) after regeneration."""

    user_id: int
    path_id: int
    hearts_remaining: int
    max_hearts: int
    last_refill_at: datetime
    next_heart_at: datetime | None
    invalidates: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_state(
        cls,
        state: HeartsState,
        next_heart_at: datetime | None,
        invalidates: frozenset[str] = frozenset(),
    ) -> "HeartsStatus":
        return cls(
            user_id=state.user_id.value,
            path_id=state.path_id.value,
            hearts_remaining=state.hearts_remaining,
            max_hearts=state.max_hearts,
            last_refill_at=state.last_refill_at,
            next_heart_at=next_heart_at,
            invalidates=invalidates,
        )


@dataclass(frozen=True)
class RefillOutcome:
    hearts: HeartsStatus
    hearts_before: int
    hearts_restored: int

    @property
    def invalidates(self) -> frozenset[str]:
        return self.hearts.invalidates


@dataclass(frozen=True)
class XpCredit:
    transaction: XpTransaction
    total_xp: int
    invalidates: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DailyXp:
    day: date
    amount: int
