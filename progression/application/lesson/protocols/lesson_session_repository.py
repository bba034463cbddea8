"""Protocol for persisted lesson sessions."""

from typing import Protocol

from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.lesson.entities.lesson_session import LessonSession


class LessonSessionRepositoryProtocol(Protocol):
    """One row per (user, lesson): the current attempt or the last one."""

    def find(self, user_id: UserId, lesson_id: NodeId, for_update: bool = False) -> LessonSession | None:
        """Session of the user for the lesson, locked for update when asked."""
        ...

    def find_by_key(self, session_key: str, for_update: bool = False) -> LessonSession | None: ...

    def save(self, session: LessonSession) -> LessonSession:
        """
        Store the session, replacing whatever the (user, lesson) row held.

        Returns:
            The stored session with its database id
        """
        ...
