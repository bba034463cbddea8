"""Repository for lesson sessions."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.lesson.entities.lesson_session import LessonSession
from progression.infrastructure.common.dialect import upsert_insert
from progression.infrastructure.lesson.mappers.lesson_session_mapper import LessonSessionMapper
from progression.models import LessonSession as LessonSessionORM

KEY_COLUMNS = ("user_id", "lesson_id")


class LessonSessionRepository:
    """Repository for LessonSession persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = LessonSessionMapper()

    def find(self, user_id: UserId, lesson_id: NodeId, for_update: bool = False) -> LessonSession | None:
        stmt = select(LessonSessionORM).where(
            LessonSessionORM.user_id == user_id.value,
            LessonSessionORM.lesson_id == lesson_id.value,
        )
        return self._one_or_none(stmt, for_update)

    def find_by_key(self, session_key: str, for_update: bool = False) -> LessonSession | None:
        stmt = select(LessonSessionORM).where(LessonSessionORM.session_key == session_key)
        return self._one_or_none(stmt, for_update)

    def save(self, session: LessonSession) -> LessonSession:
        """Upsert on (user_id, lesson_id), so a new attempt reuses the row."""
        values = self.mapper.to_values(session)
        stmt = upsert_insert(self.db, LessonSessionORM).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(KEY_COLUMNS),
            set_={column: value for column, value in values.items() if column not in KEY_COLUMNS},
        )
        self.db.execute(stmt)

        stored = self.find(session.user_id, session.lesson_id)
        if stored is None:
            raise RuntimeError(f"Lesson session for lesson {session.lesson_id} vanished after upsert")
        return stored

    def _one_or_none(self, stmt: Any, for_update: bool) -> LessonSession | None:
        stmt = stmt.execution_options(populate_existing=True)
        if for_update:
            stmt = stmt.with_for_update()
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None
