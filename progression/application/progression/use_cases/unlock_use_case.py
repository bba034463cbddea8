"""Use case answering unlock questions about the content hierarchy."""

from typing import assert_never

from progression.application.progression.messages import (
    GetNextLesson,
    IsLessonUnlocked,
    IsPathUnlocked,
    IsUnitUnlocked,
    UnlockRequest,
)
from progression.application.progression.services.unlock_service import UnlockService
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.content.entities.content_node import ContentNode, NodeKind
from progression.domain.progression.services.unlock_evaluator import UnlockDecision


class UnlockUseCase:
    """Handles UnlockRequest messages. Read-only."""

    def __init__(self, unlock_service: UnlockService) -> None:
        self.unlock_service = unlock_service

    def handle(self, message: UnlockRequest) -> UnlockDecision | ContentNode | None:
        user_id = UserId(message.user_id)

        match message:
            case IsLessonUnlocked(lesson_id=node_id):
                return self._decide(user_id, NodeId(node_id), NodeKind.LESSON)
            case IsUnitUnlocked(unit_id=node_id):
                return self._decide(user_id, NodeId(node_id), NodeKind.UNIT)
            case IsPathUnlocked(path_id=node_id):
                return self._decide(user_id, NodeId(node_id), NodeKind.PATH)
            case GetNextLesson(path_id=path_id):
                return self._next_lesson(user_id, NodeId(path_id))
            case _:
                assert_never(message)

    def _decide(self, user_id: UserId, node_id: NodeId, kind: NodeKind) -> UnlockDecision:
        node = self.unlock_service.require_node(node_id, kind)
        return self.unlock_service.evaluate(user_id, node)

    def _next_lesson(self, user_id: UserId, path_id: NodeId) -> ContentNode | None:
        """
        First lesson in unit order, then lesson order, that is unlocked and
        not completed. None once the path is finished or still locked.
        """
        path = self.unlock_service.require_node(path_id, NodeKind.PATH)
        content = self.unlock_service.content_repository
        progress = self.unlock_service.progress_repository

        for unit in content.list_children(path.id):
            lessons = content.list_children(unit.id)
            completed = progress.completed_among(user_id, (lesson.id for lesson in lessons))
            for lesson in lessons:
                if lesson.id in completed:
                    continue
                if self.unlock_service.evaluate(user_id, lesson).unlocked:
                    return lesson
                return None
        return None
