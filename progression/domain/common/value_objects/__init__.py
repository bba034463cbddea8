"""Common value objects shared across all domain modules."""

from .ids import (
    HeartsStateId,
    LessonSessionId,
    NodeId,
    ProgressRecordId,
    ReviewRecordId,
    StrugglingEntryId,
    UserId,
    XpTransactionId,
)
from .time import as_utc, day_bounds, local_day

__all__ = [
    # IDs
    "HeartsStateId",
    "LessonSessionId",
    "NodeId",
    "ProgressRecordId",
    "ReviewRecordId",
    "StrugglingEntryId",
    "UserId",
    "XpTransactionId",
    # Time helpers
    "as_utc",
    "day_bounds",
    "local_day",
]
