"""Repository for append-only review records."""

from datetime import datetime

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, aliased

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId, as_utc
from progression.domain.review.entities.review_record import ReviewRecord
from progression.infrastructure.review.mappers.review_record_mapper import ReviewRecordMapper
from progression.models import ReviewRecord as ReviewRecordORM


class ReviewRepository:
    """Repository for ReviewRecord persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ReviewRecordMapper()

    def add(self, record: ReviewRecord) -> ReviewRecord:
        orm_model = self.mapper.to_orm(record)
        self.db.add(orm_model)
        self.db.flush()
        return self.mapper.to_domain(orm_model)

    def get(self, record_id: ReviewRecordId) -> ReviewRecord | None:
        orm_model = self.db.get(ReviewRecordORM, record_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def latest_for_card(self, user_id: UserId, flashcard_id: NodeId) -> ReviewRecord | None:
        stmt = (
            select(ReviewRecordORM)
            .where(
                ReviewRecordORM.user_id == user_id.value,
                ReviewRecordORM.flashcard_id == flashcard_id.value,
            )
            .order_by(ReviewRecordORM.review_date.desc(), ReviewRecordORM.id.desc())
            .limit(1)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def outcomes_since(
        self,
        user_id: UserId,
        flashcard_id: NodeId,
        since: datetime,
        after_review_id: ReviewRecordId | None,
        limit: int,
    ) -> list[bool]:
        since = as_utc(since)
        if after_review_id is None:
            later = ReviewRecordORM.review_date >= since
        else:
            later = or_(
                ReviewRecordORM.review_date > since,
                and_(
                    ReviewRecordORM.review_date == since,
                    ReviewRecordORM.id > after_review_id.value,
                ),
            )
        stmt = (
            select(ReviewRecordORM.is_correct)
            .where(
                ReviewRecordORM.user_id == user_id.value,
                ReviewRecordORM.flashcard_id == flashcard_id.value,
                later,
            )
            .order_by(ReviewRecordORM.review_date.desc(), ReviewRecordORM.id.desc())
            .limit(limit)
        )
        return [bool(value) for value in self.db.execute(stmt).scalars().all()]

    def due_cards(self, user_id: UserId, now: datetime, limit: int) -> list[ReviewRecord]:
        """
        Latest record per card via ROW_NUMBER() over (flashcard_id), then
        filter on next_review_date. Ties on review_date fall back to id.
        """
        ranked = (
            select(
                ReviewRecordORM,
                func.row_number()
                .over(
                    partition_by=ReviewRecordORM.flashcard_id,
                    order_by=(ReviewRecordORM.review_date.desc(), ReviewRecordORM.id.desc()),
                )
                .label("row_rank"),
            )
            .where(ReviewRecordORM.user_id == user_id.value)
            .subquery()
        )
        latest = aliased(ReviewRecordORM, ranked)
        stmt = (
            select(latest)
            .where(ranked.c.row_rank == 1, ranked.c.next_review_date <= as_utc(now))
            .order_by(ranked.c.next_review_date.asc(), ranked.c.flashcard_id.asc())
            .limit(limit)
        )
        return [self.mapper.to_domain(orm) for orm in self.db.execute(stmt).scalars().all()]
