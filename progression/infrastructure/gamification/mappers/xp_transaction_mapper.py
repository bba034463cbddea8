"""Mapper for XpTransaction ORM ↔ Domain conversion."""

from progression.domain.common.value_objects import NodeId, UserId, XpTransactionId, as_utc
from progression.domain.gamification.entities.xp_transaction import XpSource, XpTransaction
from progression.models import XpTransaction as XpTransactionORM


class XpTransactionMapper:
    def to_domain(self, orm_model: XpTransactionORM) -> XpTransaction:
        return XpTransaction(
            id=XpTransactionId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            amount=orm_model.amount,
            source=XpSource(orm_model.source),
            occurred_at=as_utc(orm_model.occurred_at),
            source_id=orm_model.source_id,
            path_id=NodeId(orm_model.path_id) if orm_model.path_id else None,
        )

    def to_orm(self, transaction: XpTransaction) -> XpTransactionORM:
        return XpTransactionORM(
            user_id=transaction.user_id.value,
            amount=transaction.amount,
            source=transaction.source.value,
            source_id=transaction.source_id,
            path_id=transaction.path_id.value if transaction.path_id else None,
            occurred_at=transaction.occurred_at,
        )
