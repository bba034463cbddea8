"""
Error codes returned across the engine boundary.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_HEARTS = "INSUFFICIENT_HEARTS"
    CONFLICT = "CONFLICT"
    FETCH_ERROR = "FETCH_ERROR"


@dataclass(frozen=True)
class EngineError:
    """A business rejection or storage failure, as seen by callers."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        """Only storage failures and lost races are worth retrying."""
        return self.code in (ErrorCode.FETCH_ERROR, ErrorCode.CONFLICT)
