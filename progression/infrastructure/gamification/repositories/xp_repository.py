"""Repository for the append-only XP ledger."""

from datetime import datetime

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import UserId, as_utc
from progression.domain.gamification.entities.xp_transaction import XpSource, XpTransaction
from progression.infrastructure.gamification.mappers.xp_transaction_mapper import (
    XpTransactionMapper,
)
from progression.models import XpTransaction as XpTransactionORM


class XpRepository:
    """Repository for XpTransaction persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = XpTransactionMapper()

    def add(self, transaction: XpTransaction) -> XpTransaction:
        orm_model = self.mapper.to_orm(transaction)
        self.db.add(orm_model)
        self.db.flush()
        return self.mapper.to_domain(orm_model)

    def total(self, user_id: UserId) -> int:
        stmt = select(func.coalesce(func.sum(XpTransactionORM.amount), 0)).where(
            XpTransactionORM.user_id == user_id.value
        )
        return int(self.db.execute(stmt).scalar() or 0)

    def sum_between(self, user_id: UserId, start: datetime, end: datetime) -> int:
        stmt = select(func.coalesce(func.sum(XpTransactionORM.amount), 0)).where(
            XpTransactionORM.user_id == user_id.value,
            XpTransactionORM.occurred_at >= as_utc(start),
            XpTransactionORM.occurred_at < as_utc(end),
        )
        return int(self.db.execute(stmt).scalar() or 0)

    def list_between(self, user_id: UserId, start: datetime, end: datetime) -> list[XpTransaction]:
        stmt = (
            select(XpTransactionORM)
            .where(
                XpTransactionORM.user_id == user_id.value,
                XpTransactionORM.occurred_at >= as_utc(start),
                XpTransactionORM.occurred_at < as_utc(end),
            )
            .order_by(XpTransactionORM.occurred_at.asc(), XpTransactionORM.id.asc())
        )
        return [self.mapper.to_domain(orm) for orm in self.db.execute(stmt).scalars().all()]

    def has_source_between(
        self, user_id: UserId, source: XpSource, start: datetime, end: datetime
    ) -> bool:
        stmt = select(
            exists().where(
                XpTransactionORM.user_id == user_id.value,
                XpTransactionORM.source == source.value,
                XpTransactionORM.occurred_at >= as_utc(start),
                XpTransactionORM.occurred_at < as_utc(end),
            )
        )
        return bool(self.db.execute(stmt).scalar())
