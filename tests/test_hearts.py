"""Tests for the hearts economy through the message bus."""

from datetime import timedelta
from typing import Any

import pytest
from dependency_injector import providers
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from progression import models
from progression.application.common.errors import ErrorCode
from progression.application.common.invalidation import hearts_tag
from progression.application.common.message_bus import MessageBus
from progression.application.gamification.messages import DebitHearts, GetHearts, RefillHearts
from progression.core import container
from progression.domain.common.exceptions import ConcurrencyConflictError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.gamification.entities.hearts_state import HeartsState
from progression.infrastructure.gamification.repositories.hearts_repository import (
    HeartsRepository,
)
from tests.conftest import START, USER_ID, Course, FixedClock


class TestGetHearts:
    def test_first_read_creates_full_hearts(self, bus: MessageBus, course: Course, db_session: Session) -> None:
        hearts = bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        assert hearts.hearts_remaining == 5
        assert hearts.max_hearts == 5
        assert hearts.next_heart_at is None
        assert db_session.scalar(select(func.count()).select_from(models.HeartsState)) == 1

    def test_hearts_are_tracked_per_path(self, bus: MessageBus, course: Course) -> None:
        bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        other = bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_b)).unwrap()
        assert other.hearts_remaining == 5

    def test_invalid_ids_are_rejected(self, bus: MessageBus) -> None:
        result = bus.dispatch(GetHearts(user_id=0, path_id=1))
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR


class TestDebitHearts:
    def test_debit_takes_one_heart(self, bus: MessageBus, course: Course) -> None:
        hearts = bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        assert hearts.hearts_remaining == 4
        assert hearts.next_heart_at == START + timedelta(minutes=30)
        assert hearts.invalidates == {hearts_tag(USER_ID, course.path_a)}

    def test_debit_at_zero_fails(self, bus: MessageBus, course: Course) -> None:
        for _ in range(5):
            bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        result = bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a))

        error = result.unwrap_error()
        assert error.code is ErrorCode.INSUFFICIENT_HEARTS
        hearts = bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()
        assert hearts.hearts_remaining == 0

    def test_hearts_regenerate_over_time(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        for _ in range(3):
            bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        clock.advance(minutes=65)
        hearts = bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        assert hearts.hearts_remaining == 4
        assert hearts.next_heart_at == START + timedelta(minutes=90)

    def test_version_increments_on_every_write(
        self, bus: MessageBus, course: Course, db_session: Session
    ) -> None:
        bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()
        bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        row = db_session.scalars(select(models.HeartsState)).one()
        db_session.refresh(row)
        assert row.version == 2
        assert row.hearts_remaining == 3


class TestRefillHearts:
    def test_refill_restores_max(self, bus: MessageBus, course: Course) -> None:
        for _ in range(2):
            bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        outcome = bus.dispatch(RefillHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        assert outcome.hearts_before == 3
        assert outcome.hearts_restored == 2
        assert outcome.hearts.hearts_remaining == 5
        assert outcome.hearts.next_heart_at is None


def bump_version(db_session: Session, state_id: int) -> None:
    """Simulate another writer committing between our read and our write."""
    db_session.execute(
        update(models.HeartsState)
        .where(models.HeartsState.id == state_id)
        .values(version=models.HeartsState.version + 1)
    )


class RacingHeartsRepository(HeartsRepository):
    """Another writer updates the row right after every read."""

    def get_or_create(self, *args: Any, **kwargs: Any) -> HeartsState:
        state = super().get_or_create(*args, **kwargs)
        bump_version(self.db, state.id.value)
        return state


class TestConcurrentWrites:
    def test_stale_version_is_rejected(self, db_session: Session, course: Course) -> None:
        repository = HeartsRepository(db_session)
        state = repository.get_or_create(UserId(USER_ID), NodeId(course.path_a), 5, START)
        db_session.commit()

        bump_version(db_session, state.id.value)
        state.debit(START, timedelta(minutes=30))

        with pytest.raises(ConcurrencyConflictError):
            repository.save(state)

        row = db_session.scalars(select(models.HeartsState)).one()
        db_session.refresh(row)
        assert row.hearts_remaining == 5
        assert row.version == 1

    def test_lost_race_is_a_retryable_conflict(
        self, bus: MessageBus, course: Course, db_session: Session
    ) -> None:
        bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()

        container.hearts_repository.override(
            providers.Factory(RacingHeartsRepository, db=container.db)
        )
        try:
            racing_bus = container.message_bus()
            result = racing_bus.dispatch(DebitHearts(user_id=USER_ID, path_id=course.path_a))
        finally:
            container.hearts_repository.reset_override()

        error = result.unwrap_error()
        assert error.code is ErrorCode.CONFLICT
        assert error.retryable is True

        hearts = bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_a)).unwrap()
        assert hearts.hearts_remaining == 4
