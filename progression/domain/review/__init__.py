"""Review module domain layer."""

from .entities import ReviewMode, ReviewRecord, StrugglingEntry
from .services import SchedulingPolicy, compose_session

__all__ = [
    "ReviewMode",
    "ReviewRecord",
    "SchedulingPolicy",
    "StrugglingEntry",
    "compose_session",
]
