"""Tests for message routing and error translation."""

from dataclasses import dataclass

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from progression.application.common.command import Command
from progression.application.common.errors import ErrorCode
from progression.application.common.message_bus import MessageBus
from progression.application.common.query import Query
from progression.application.common.result import Failure, Success
from progression.domain.common.exceptions import (
    AccessDeniedError,
    InsufficientHeartsError,
    InvariantViolationError,
    ValidationError,
)


@dataclass(frozen=True)
class Ping(Query):
    value: int


@dataclass(frozen=True)
class Fail(Command):
    error: Exception


PingRequest = Ping | Fail


class EchoHandler:
    def handle(self, message: PingRequest) -> int:
        if isinstance(message, Fail):
            raise message.error
        return message.value


@pytest.fixture
def bus() -> MessageBus:
    bus = MessageBus(transient_errors=(OperationalError,))
    bus.register(PingRequest, EchoHandler())
    return bus


class TestMessageBus:
    def test_routes_every_member_of_the_union(self, bus: MessageBus) -> None:
        assert set(bus.routes) == {Ping, Fail}

    def test_duplicate_route_is_rejected(self, bus: MessageBus) -> None:
        with pytest.raises(ValueError):
            bus.register(Ping, EchoHandler())

    def test_unknown_message_raises(self, bus: MessageBus) -> None:
        @dataclass(frozen=True)
        class Unknown(Query):
            pass

        with pytest.raises(LookupError):
            bus.dispatch(Unknown())

    def test_success_wraps_value(self, bus: MessageBus) -> None:
        result = bus.dispatch(Ping(value=3))
        assert result == Success(3)
        assert result.unwrap() == 3

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ValidationError("bad", "field", 1), ErrorCode.VALIDATION_ERROR),
            (AccessDeniedError("nope"), ErrorCode.FORBIDDEN),
            (InsufficientHeartsError(1, 2), ErrorCode.INSUFFICIENT_HEARTS),
        ],
    )
    def test_domain_errors_become_failures(self, bus: MessageBus, error: Exception, code: ErrorCode) -> None:
        result = bus.dispatch(Fail(error=error))

        assert isinstance(result, Failure)
        assert result.error.code is code
        assert result.error.retryable is False

    def test_transient_storage_error_is_retryable(self, bus: MessageBus) -> None:
        error = OperationalError("SELECT 1", {}, Exception("connection reset"))
        result = bus.dispatch(Fail(error=error))

        assert isinstance(result, Failure)
        assert result.error.code is ErrorCode.FETCH_ERROR
        assert result.error.retryable is True

    def test_invariant_violation_propagates(self, bus: MessageBus) -> None:
        with pytest.raises(InvariantViolationError):
            bus.dispatch(Fail(error=InvariantViolationError("HeartsState", "broken")))

    def test_integrity_error_propagates(self, bus: MessageBus) -> None:
        error = IntegrityError("INSERT", {}, Exception("duplicate key"))
        with pytest.raises(IntegrityError):
            bus.dispatch(Fail(error=error))
