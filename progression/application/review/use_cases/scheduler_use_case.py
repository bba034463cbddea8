"""Use case exposing the spaced repetition scheduler."""

from typing import assert_never

from progression.application.common.clock import Clock
from progression.application.common.unit_of_work import UnitOfWork
from progression.application.progression.protocols.content_repository import (
    ContentRepositoryProtocol,
)
from progression.application.review.messages import (
    AddToStrugglingQueue,
    GetDueCards,
    GetStrugglingCards,
    RecordOutcome,
    RemoveFromStrugglingQueue,
    SchedulerRequest,
)
from progression.application.review.services.scheduler_service import (
    SchedulerService,
    parse_review_mode,
)
from progression.domain.common.exceptions import EntityNotFoundError, ValidationError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.content.entities.content_node import ContentNode, NodeKind
from progression.domain.review.entities.review_record import ReviewRecord
from progression.domain.review.entities.struggling_entry import StrugglingEntry


def validate_limit(limit: int, max_limit: int) -> int:
    if not 1 <= limit <= max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}", "limit", limit)
    return limit


class SchedulerUseCase:
    """Handles SchedulerRequest messages."""

    def __init__(
        self,
        scheduler_service: SchedulerService,
        content_repository: ContentRepositoryProtocol,
        uow: UnitOfWork,
        clock: Clock,
        max_limit: int,
    ) -> None:
        self.scheduler_service = scheduler_service
        self.content_repository = content_repository
        self.uow = uow
        self.clock = clock
        self.max_limit = max_limit

    def handle(
        self, message: SchedulerRequest
    ) -> list[ReviewRecord] | list[StrugglingEntry] | ReviewRecord | StrugglingEntry | bool:
        user_id = UserId(message.user_id)

        match message:
            case GetDueCards(limit=limit):
                return self.scheduler_service.due_cards(
                    user_id, self.clock.now(), validate_limit(limit, self.max_limit)
                )
            case GetStrugglingCards(limit=limit):
                return self.scheduler_service.struggling_cards(
                    user_id, validate_limit(limit, self.max_limit)
                )
            case RecordOutcome():
                return self._record_outcome(user_id, message)
            case AddToStrugglingQueue(flashcard_id=flashcard_id):
                flashcard = self._require_flashcard(NodeId(flashcard_id))
                with self.uow:
                    entry = self.scheduler_service.mark_struggling(
                        user_id, flashcard.id, self.clock.now()
                    )
                    self.uow.commit()
                return entry
            case RemoveFromStrugglingQueue(flashcard_id=flashcard_id):
                with self.uow:
                    removed = self.scheduler_service.unmark_struggling(user_id, NodeId(flashcard_id))
                    self.uow.commit()
                return removed
            case _:
                assert_never(message)

    def _record_outcome(self, user_id: UserId, message: RecordOutcome) -> ReviewRecord:
        flashcard_id = NodeId(message.flashcard_id)
        mode = parse_review_mode(message.mode)
        self._require_flashcard(flashcard_id)

        with self.uow:
            record = self.scheduler_service.record_outcome(
                user_id, flashcard_id, message.is_correct, mode, self.clock.now()
            )
            self.uow.commit()
        return record

    def _require_flashcard(self, flashcard_id: NodeId) -> ContentNode:
        flashcard = self.content_repository.get_node(flashcard_id)
        if flashcard is None or flashcard.kind is not NodeKind.FLASHCARD:
            raise EntityNotFoundError("Flashcard", flashcard_id.value)
        return flashcard
