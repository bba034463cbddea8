"""Repository for the per-user progress ledger."""

from collections.abc import Iterable

from sqlalchemy import case, exists, select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.progression.entities.progress_record import ProgressRecord
from progression.infrastructure.common.dialect import upsert_insert
from progression.infrastructure.progression.mappers.progress_record_mapper import (
    ProgressRecordMapper,
)
from progression.models import ProgressRecord as ProgressRecordORM


class ProgressRepository:
    """Repository for ProgressRecord persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ProgressRecordMapper()

    def find(self, user_id: UserId, node_id: NodeId) -> ProgressRecord | None:
        stmt = (
            select(ProgressRecordORM)
            .where(
                ProgressRecordORM.user_id == user_id.value,
                ProgressRecordORM.node_id == node_id.value,
            )
            .execution_options(populate_existing=True)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def is_completed(self, user_id: UserId, node_id: NodeId) -> bool:
        stmt = select(
            exists().where(
                ProgressRecordORM.user_id == user_id.value,
                ProgressRecordORM.node_id == node_id.value,
            )
        )
        return bool(self.db.execute(stmt).scalar())

    def completed_among(self, user_id: UserId, node_ids: Iterable[NodeId]) -> set[NodeId]:
        return set(self.scores_for(user_id, node_ids))

    def scores_for(self, user_id: UserId, node_ids: Iterable[NodeId]) -> dict[NodeId, int]:
        ids = [node_id.value for node_id in node_ids]
        if not ids:
            return {}
        stmt = select(ProgressRecordORM.node_id, ProgressRecordORM.score).where(
            ProgressRecordORM.user_id == user_id.value,
            ProgressRecordORM.node_id.in_(ids),
        )
        return {NodeId(node_id): score for node_id, score in self.db.execute(stmt).all()}

    def record_completion(self, record: ProgressRecord) -> ProgressRecord:
        """
        Upsert on (user_id, node_id), keeping the higher score.

        A single statement, so two concurrent completions can't lose the
        best score or fail on the unique key.
        """
        stmt = upsert_insert(self.db, ProgressRecordORM).values(**self.mapper.to_values(record))
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "node_id"],
            set_={
                "score": case(
                    (stmt.excluded.score > ProgressRecordORM.score, stmt.excluded.score),
                    else_=ProgressRecordORM.score,
                ),
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)

        stored = self.find(record.user_id, record.node_id)
        if stored is None:
            raise RuntimeError(f"Progress record for node {record.node_id} vanished after upsert")
        return stored
