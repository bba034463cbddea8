"""Mapper for StrugglingEntry ORM → Domain conversion."""

from progression.domain.common.value_objects import (
    NodeId,
    ReviewRecordId,
    StrugglingEntryId,
    UserId,
    as_utc,
)
from progression.domain.review.entities.struggling_entry import StrugglingEntry
from progression.models import StrugglingEntry as StrugglingEntryORM


class StrugglingEntryMapper:
    def to_domain(self, orm_model: StrugglingEntryORM) -> StrugglingEntry:
        return StrugglingEntry(
            id=StrugglingEntryId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            flashcard_id=NodeId(orm_model.flashcard_id),
            times_failed=orm_model.times_failed,
            last_failed_at=as_utc(orm_model.last_failed_at),
            added_at=as_utc(orm_model.added_at),
            anchor_review_id=(
                ReviewRecordId(orm_model.anchor_review_id)
                if orm_model.anchor_review_id is not None
                else None
            ),
        )
