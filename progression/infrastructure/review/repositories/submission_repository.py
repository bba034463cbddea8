"""Repository for idempotency keys of submitted answers."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from progression.application.review.protocols.submission_repository import StoredSubmission
from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId, as_utc
from progression.infrastructure.common.dialect import upsert_insert
from progression.models import ReviewSubmission as ReviewSubmissionORM


class SubmissionRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def claim(self, session_id: str, flashcard_id: NodeId, user_id: UserId, now: datetime) -> bool:
        stmt = (
            upsert_insert(self.db, ReviewSubmissionORM)
            .values(
                session_id=session_id,
                flashcard_id=flashcard_id.value,
                user_id=user_id.value,
                xp_awarded=0,
                created_at=as_utc(now),
            )
            .on_conflict_do_nothing(index_elements=["session_id", "flashcard_id"])
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def find(self, session_id: str, flashcard_id: NodeId) -> StoredSubmission | None:
        stmt = (
            select(ReviewSubmissionORM)
            .where(
                ReviewSubmissionORM.session_id == session_id,
                ReviewSubmissionORM.flashcard_id == flashcard_id.value,
            )
            .execution_options(populate_existing=True)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        if orm_model is None:
            return None
        return StoredSubmission(
            session_id=orm_model.session_id,
            flashcard_id=NodeId(orm_model.flashcard_id),
            user_id=UserId(orm_model.user_id),
            review_record_id=(
                ReviewRecordId(orm_model.review_record_id) if orm_model.review_record_id else None
            ),
            xp_awarded=orm_model.xp_awarded,
            hearts_remaining=orm_model.hearts_remaining,
        )

    def complete(
        self,
        session_id: str,
        flashcard_id: NodeId,
        review_record_id: ReviewRecordId,
        xp_awarded: int,
        hearts_remaining: int | None,
    ) -> None:
        stmt = (
            update(ReviewSubmissionORM)
            .where(
                ReviewSubmissionORM.session_id == session_id,
                ReviewSubmissionORM.flashcard_id == flashcard_id.value,
            )
            .values(
                review_record_id=review_record_id.value,
                xp_awarded=xp_awarded,
                hearts_remaining=hearts_remaining,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.execute(stmt)
