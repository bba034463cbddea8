"""Mapper for ReviewRecord ORM ↔ Domain conversion."""

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId, as_utc
from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord
from progression.models import ReviewRecord as ReviewRecordORM


class ReviewRecordMapper:
    def to_domain(self, orm_model: ReviewRecordORM) -> ReviewRecord:
        return ReviewRecord(
            id=ReviewRecordId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            flashcard_id=NodeId(orm_model.flashcard_id),
            review_mode=ReviewMode(orm_model.review_mode),
            is_correct=orm_model.is_correct,
            review_date=as_utc(orm_model.review_date),
            next_review_date=as_utc(orm_model.next_review_date),
            interval_days=orm_model.interval_days,
        )

    def to_orm(self, record: ReviewRecord) -> ReviewRecordORM:
        return ReviewRecordORM(
            user_id=record.user_id.value,
            flashcard_id=record.flashcard_id.value,
            review_mode=record.review_mode.value,
            is_correct=record.is_correct,
            review_date=record.review_date,
            next_review_date=record.next_review_date,
            interval_days=record.interval_days,
        )
