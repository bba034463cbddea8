"""Tests for HeartsState regeneration and debit rules."""

from datetime import UTC, datetime, timedelta

import pytest

from progression.domain.common.exceptions import InsufficientHeartsError, InvariantViolationError
from progression.domain.common.value_objects import HeartsStateId, NodeId, UserId
from progression.domain.gamification.entities.hearts_state import HeartsState

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
INTERVAL = timedelta(minutes=30)


def make_state(hearts: int, last_refill_at: datetime = NOW, max_hearts: int = 5) -> HeartsState:
    return HeartsState(
        id=HeartsStateId(1),
        user_id=UserId(1),
        path_id=NodeId(10),
        hearts_remaining=hearts,
        max_hearts=max_hearts,
        last_refill_at=last_refill_at,
    )


class TestHeartsStateInvariants:
    def test_rejects_more_hearts_than_max(self) -> None:
        with pytest.raises(InvariantViolationError):
            make_state(hearts=6)

    def test_rejects_negative_hearts(self) -> None:
        with pytest.raises(InvariantViolationError):
            make_state(hearts=-1)

    def test_naive_refill_time_is_read_as_utc(self) -> None:
        state = make_state(hearts=3, last_refill_at=NOW.replace(tzinfo=None))
        assert state.last_refill_at == NOW

    def test_start_is_full(self) -> None:
        state = HeartsState.start(UserId(1), NodeId(10), 5, NOW)
        assert state.is_full
        assert state.next_heart_at(INTERVAL) is None


class TestRegenerate:
    def test_full_state_gains_nothing(self) -> None:
        state = make_state(hearts=5, last_refill_at=NOW - timedelta(days=1))
        assert state.regenerate(NOW, INTERVAL) == 0
        assert state.last_refill_at == NOW - timedelta(days=1)

    def test_partial_interval_gains_nothing(self) -> None:
        state = make_state(hearts=2)
        assert state.regenerate(NOW + timedelta(minutes=29), INTERVAL) == 0
        assert state.hearts_remaining == 2

    def test_whole_intervals_are_credited_and_remainder_kept(self) -> None:
        state = make_state(hearts=1)
        gained = state.regenerate(NOW + timedelta(minutes=75), INTERVAL)

        assert gained == 2
        assert state.hearts_remaining == 3
        # The 15 leftover minutes count towards the next heart
        assert state.last_refill_at == NOW + timedelta(minutes=60)
        assert state.next_heart_at(INTERVAL) == NOW + timedelta(minutes=90)

    def test_reaching_max_resets_the_timer_to_now(self) -> None:
        state = make_state(hearts=3)
        later = NOW + timedelta(minutes=65)

        assert state.regenerate(later, INTERVAL) == 2
        assert state.hearts_remaining == 5
        assert state.last_refill_at == later
        assert state.next_heart_at(INTERVAL) is None

    def test_regeneration_caps_at_max(self) -> None:
        state = make_state(hearts=0)
        gained = state.regenerate(NOW + timedelta(hours=10), INTERVAL)

        assert gained == 5
        assert state.is_full
        assert state.last_refill_at == NOW + timedelta(hours=10)

    def test_clock_going_backwards_gains_nothing(self) -> None:
        state = make_state(hearts=2)
        assert state.regenerate(NOW - timedelta(hours=1), INTERVAL) == 0
        assert state.last_refill_at == NOW


class TestDebit:
    def test_debit_from_full_starts_the_timer(self) -> None:
        state = make_state(hearts=5, last_refill_at=NOW - timedelta(days=2))
        later = NOW + timedelta(minutes=5)

        state.debit(later, INTERVAL)

        assert state.hearts_remaining == 4
        assert state.last_refill_at == later
        assert state.next_heart_at(INTERVAL) == later + INTERVAL

    def test_debit_keeps_running_timer(self) -> None:
        state = make_state(hearts=3)
        state.debit(NOW + timedelta(minutes=10), INTERVAL)

        assert state.hearts_remaining == 2
        assert state.last_refill_at == NOW

    def test_debit_at_zero_raises(self) -> None:
        state = make_state(hearts=0)
        with pytest.raises(InsufficientHeartsError):
            state.debit(NOW + timedelta(minutes=10), INTERVAL)
        assert state.hearts_remaining == 0

    def test_debit_at_zero_succeeds_after_regeneration(self) -> None:
        state = make_state(hearts=0)
        state.debit(NOW + timedelta(minutes=31), INTERVAL)
        assert state.hearts_remaining == 0
        assert state.last_refill_at == NOW + INTERVAL


class TestRefill:
    def test_refill_restores_max(self) -> None:
        state = make_state(hearts=1)
        restored = state.refill(NOW + timedelta(minutes=1))

        assert restored == 4
        assert state.is_full
        assert state.last_refill_at == NOW + timedelta(minutes=1)

    def test_refill_when_full_restores_nothing(self) -> None:
        state = make_state(hearts=5)
        assert state.refill(NOW) == 0
