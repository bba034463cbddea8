from dataclasses import dataclass

from ..entity import EntityId
from ..exceptions import ValidationError


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool) or self.value <= 0:
            raise ValidationError("UserId must be a positive integer", "user_id", self.value)


@dataclass(frozen=True)
class NodeId(EntityId):
    """Identifier of any content node: domain, path, unit, lesson or flashcard."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool) or self.value <= 0:
            raise ValidationError("NodeId must be a positive integer", "node_id", self.value)


@dataclass(frozen=True)
class ProgressRecordId(EntityId):
    """Strongly-typed progress record identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("ProgressRecordId must be non-negative")


@dataclass(frozen=True)
class HeartsStateId(EntityId):
    """Strongly-typed hearts state identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("HeartsStateId must be non-negative")


@dataclass(frozen=True)
class ReviewRecordId(EntityId):
    """Strongly-typed review record identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("ReviewRecordId must be non-negative")


@dataclass(frozen=True)
class StrugglingEntryId(EntityId):
    """Strongly-typed struggling queue entry identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("StrugglingEntryId must be non-negative")


@dataclass(frozen=True)
class XpTransactionId(EntityId):
    """Strongly-typed XP transaction identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("XpTransactionId must be non-negative")


@dataclass(frozen=True)
class LessonSessionId(EntityId):
    """Strongly-typed lesson session identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("LessonSessionId must be non-negative")
