"""Mapper for LessonSession ORM ↔ Domain conversion."""

from progression.domain.common.value_objects import LessonSessionId, NodeId, UserId, as_utc
from progression.domain.lesson.entities.lesson_session import LessonSession, SessionStatus
from progression.models import LessonSession as LessonSessionORM


class LessonSessionMapper:
    def to_domain(self, orm_model: LessonSessionORM) -> LessonSession:
        return LessonSession(
            id=LessonSessionId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            lesson_id=NodeId(orm_model.lesson_id),
            path_id=NodeId(orm_model.path_id),
            session_key=orm_model.session_key,
            status=SessionStatus(orm_model.status),
            card_ids=tuple(NodeId(card_id) for card_id in orm_model.card_ids),
            started_at=as_utc(orm_model.started_at),
            last_activity_at=as_utc(orm_model.last_activity_at),
            current_index=orm_model.current_index,
            correct_count=orm_model.correct_count,
            paused_at=as_utc(orm_model.paused_at) if orm_model.paused_at else None,
            ended_at=as_utc(orm_model.ended_at) if orm_model.ended_at else None,
        )

    def to_values(self, session: LessonSession) -> dict[str, object]:
        return {
            "user_id": session.user_id.value,
            "lesson_id": session.lesson_id.value,
            "path_id": session.path_id.value,
            "session_key": session.session_key,
            "status": session.status.value,
            "card_ids": [card_id.value for card_id in session.card_ids],
            "current_index": session.current_index,
            "correct_count": session.correct_count,
            "started_at": session.started_at,
            "last_activity_at": session.last_activity_at,
            "paused_at": session.paused_at,
            "ended_at": session.ended_at,
        }
