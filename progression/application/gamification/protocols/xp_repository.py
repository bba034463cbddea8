"""Protocol for the XP ledger."""

from datetime import datetime
from typing import Protocol

from progression.domain.common.value_objects import UserId
from progression.domain.gamification.entities.xp_transaction import XpSource, XpTransaction


class XpRepositoryProtocol(Protocol):
    def add(self, transaction: XpTransaction) -> XpTransaction: ...

    def total(self, user_id: UserId) -> int: ...

    def sum_between(self, user_id: UserId, start: datetime, end: datetime) -> int:
        """Sum of amounts with ``start <= occurred_at < end``."""
        ...

    def list_between(self, user_id: UserId, start: datetime, end: datetime) -> list[XpTransaction]:
        """Transactions in ``[start, end)`` ordered by occurred_at."""
        ...

    def has_source_between(
        self, user_id: UserId, source: XpSource, start: datetime, end: datetime
    ) -> bool: ...
