"""
XpTransaction entity: one immutable entry of the XP ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, UserId, XpTransactionId, as_utc


class XpSource(StrEnum):
    REVIEW = "review"
    LESSON_ANSWER = "lesson_answer"
    LESSON_COMPLETION = "lesson_completion"
    STREAK_BONUS = "streak_bonus"
    ADMIN_GRANT = "admin_grant"


@dataclass
class XpTransaction(Entity[XpTransactionId]):
    """
    A credit of experience points.

    The ledger is append-only; totals are sums over it. A zero amount is a
    valid entry (an incorrect answer earns nothing but is still recorded).
    """

    id: XpTransactionId
    user_id: UserId
    amount: int
    source: XpSource
    occurred_at: datetime
    source_id: int | None = None
    path_id: NodeId | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValidationError("XP amount cannot be negative", "amount", self.amount)
        self.occurred_at = as_utc(self.occurred_at)

    @classmethod
    def create(
        cls,
        user_id: UserId,
        amount: int,
        source: XpSource,
        occurred_at: datetime,
        source_id: int | None = None,
        path_id: NodeId | None = None,
    ) -> "XpTransaction":
        return cls(
            id=XpTransactionId.generate(),
            user_id=user_id,
            amount=amount,
            source=source,
            occurred_at=occurred_at,
            source_id=source_id,
            path_id=path_id,
        )
