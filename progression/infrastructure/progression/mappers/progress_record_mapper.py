"""Mapper for ProgressRecord ORM ↔ Domain conversion."""

from progression.domain.common.value_objects import NodeId, ProgressRecordId, UserId, as_utc
from progression.domain.content.entities.content_node import NodeKind
from progression.domain.progression.entities.progress_record import ProgressRecord
from progression.models import ProgressRecord as ProgressRecordORM


class ProgressRecordMapper:
    def to_domain(self, orm_model: ProgressRecordORM) -> ProgressRecord:
        return ProgressRecord(
            id=ProgressRecordId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            node_id=NodeId(orm_model.node_id),
            node_kind=NodeKind(orm_model.node_kind),
            score=orm_model.score,
            completed_at=as_utc(orm_model.completed_at),
        )

    def to_values(self, record: ProgressRecord) -> dict[str, object]:
        """Column values for an INSERT of a new record."""
        return {
            "user_id": record.user_id.value,
            "node_id": record.node_id.value,
            "node_kind": record.node_kind.value,
            "score": record.score,
            "completed_at": record.completed_at,
            "updated_at": record.completed_at,
        }
