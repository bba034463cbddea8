"""
Result type returned by the message bus.

Business rejections (locked lesson, no hearts left, bad input) are expected
outcomes, not crashes, so the bus returns them as values.

Example:
    result = bus.dispatch(DebitHearts(user_id=1, path_id=7))
    match result:
        case Success(value=state):
            print(state.hearts_remaining)
        case Failure(error=error):
            print(error.code)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped value type


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome carrying a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> None:
        raise ValueError("Cannot get error from Success result")

    def value_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A rejected outcome carrying the error."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> None:
        raise ValueError(f"Cannot get value from Failure result: {self.error!r}")

    def unwrap_error(self) -> E:
        return self.error

    def value_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[T], U]) -> "Failure[E]":
        return self


Result = Success[T] | Failure[E]
