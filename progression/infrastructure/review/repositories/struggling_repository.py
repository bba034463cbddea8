"""Repository for the per-user struggling queue."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId, as_utc
from progression.domain.review.entities.struggling_entry import StrugglingEntry
from progression.infrastructure.common.dialect import upsert_insert
from progression.infrastructure.review.mappers.struggling_entry_mapper import (
    StrugglingEntryMapper,
)
from progression.models import StrugglingEntry as StrugglingEntryORM


class StrugglingRepository:
    """Repository for StrugglingEntry persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = StrugglingEntryMapper()

    def record_failure(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        now: datetime,
        anchor_review_id: ReviewRecordId | None = None,
    ) -> StrugglingEntry:
        now = as_utc(now)
        anchor = anchor_review_id.value if anchor_review_id is not None else None
        stmt = upsert_insert(self.db, StrugglingEntryORM).values(
            user_id=user_id.value,
            flashcard_id=flashcard_id.value,
            times_failed=1,
            last_failed_at=now,
            added_at=now,
            anchor_review_id=anchor,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "flashcard_id"],
            set_={
                "times_failed": StrugglingEntryORM.times_failed + 1,
                "last_failed_at": stmt.excluded.last_failed_at,
                "anchor_review_id": stmt.excluded.anchor_review_id,
            },
        )
        self.db.execute(stmt)

        entry = self.find(user_id, flashcard_id)
        if entry is None:
            raise RuntimeError(f"Struggling entry for card {flashcard_id} vanished after upsert")
        return entry

    def find(self, user_id: UserId, flashcard_id: NodeId) -> StrugglingEntry | None:
        stmt = (
            select(StrugglingEntryORM)
            .where(
                StrugglingEntryORM.user_id == user_id.value,
                StrugglingEntryORM.flashcard_id == flashcard_id.value,
            )
            .execution_options(populate_existing=True)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def remove(self, user_id: UserId, flashcard_id: NodeId) -> bool:
        stmt = delete(StrugglingEntryORM).where(
            StrugglingEntryORM.user_id == user_id.value,
            StrugglingEntryORM.flashcard_id == flashcard_id.value,
        )
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount > 0

    def list_for_user(self, user_id: UserId, limit: int) -> list[StrugglingEntry]:
        stmt = (
            select(StrugglingEntryORM)
            .where(StrugglingEntryORM.user_id == user_id.value)
            .order_by(
                StrugglingEntryORM.times_failed.desc(),
                StrugglingEntryORM.last_failed_at.asc(),
                StrugglingEntryORM.flashcard_id.asc(),
            )
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self.mapper.to_domain(orm) for orm in self.db.execute(stmt).scalars().all()]
