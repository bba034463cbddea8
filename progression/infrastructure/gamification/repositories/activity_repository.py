"""Reads learning activity timestamps for streak calculation."""

import heapq
from collections.abc import Generator
from datetime import date, datetime, tzinfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import UserId, as_utc, local_day
from progression.domain.content.entities.content_node import NodeKind
from progression.models import ProgressRecord as ProgressRecordORM
from progression.models import ReviewRecord as ReviewRecordORM

# Rows fetched per round trip while walking activity backwards
BATCH_SIZE = 100


class ActivityRepository:
    """Merges review and lesson completion timestamps into activity days."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def activity_days(self, user_id: UserId, tz: tzinfo, until: datetime) -> Generator[date, None, None]:
        until = as_utc(until)
        reviews = (
            select(ReviewRecordORM.review_date)
            .where(ReviewRecordORM.user_id == user_id.value, ReviewRecordORM.review_date <= until)
            .order_by(ReviewRecordORM.review_date.desc())
        )
        first_completions = (
            select(ProgressRecordORM.completed_at)
            .where(
                ProgressRecordORM.user_id == user_id.value,
                ProgressRecordORM.node_kind == NodeKind.LESSON.value,
                ProgressRecordORM.completed_at <= until,
            )
            .order_by(ProgressRecordORM.completed_at.desc())
        )
        latest_completions = (
            select(ProgressRecordORM.updated_at)
            .where(
                ProgressRecordORM.user_id == user_id.value,
                ProgressRecordORM.node_kind == NodeKind.LESSON.value,
                ProgressRecordORM.updated_at <= until,
            )
            .order_by(ProgressRecordORM.updated_at.desc())
        )

        results = [
            self.db.execute(stmt.execution_options(yield_per=BATCH_SIZE)).scalars()
            for stmt in (reviews, first_completions, latest_completions)
        ]
        try:
            previous: date | None = None
            for timestamp in heapq.merge(*(map(as_utc, result) for result in results), reverse=True):
                day = local_day(timestamp, tz)
                if day != previous:
                    yield day
                    previous = day
        finally:
            for result in results:
                result.close()
