"""Use case orchestrating review sessions."""

import uuid
from typing import assert_never

import structlog

from progression.application.common.clock import Clock
from progression.application.common.invalidation import reviews_tag, stats_tag, tags
from progression.application.common.unit_of_work import UnitOfWork
from progression.application.gamification.services.xp_service import XpService
from progression.application.progression.protocols.content_repository import (
    ContentRepositoryProtocol,
)
from progression.application.review.dtos import ReviewOutcome, SessionCard, SessionHandle
from progression.application.review.messages import (
    ReviewSessionRequest,
    StartReviewSession,
    SubmitReview,
)
from progression.application.review.services.scheduler_service import (
    SchedulerService,
    parse_review_mode,
)
from progression.application.review.services.submission_service import (
    SubmissionService,
    validate_session_id,
)
from progression.application.review.use_cases.scheduler_use_case import validate_limit
from progression.domain.common.exceptions import EntityNotFoundError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.content.entities.content_node import NodeKind
from progression.domain.gamification.entities.xp_transaction import XpSource
from progression.domain.gamification.services.xp_reward_policy import XpRewardPolicy
from progression.domain.review.services.spaced_repetition import compose_session

logger = structlog.get_logger(__name__)


class ReviewSessionUseCase:
    """
    Handles ReviewSessionRequest messages.

    Sessions are not stored: a session id only namespaces the idempotency
    keys of the answers submitted under it.
    """

    def __init__(
        self,
        scheduler_service: SchedulerService,
        submission_service: SubmissionService,
        xp_service: XpService,
        content_repository: ContentRepositoryProtocol,
        reward_policy: XpRewardPolicy,
        uow: UnitOfWork,
        clock: Clock,
        default_limit: int,
        max_limit: int,
    ) -> None:
        self.scheduler_service = scheduler_service
        self.submission_service = submission_service
        self.xp_service = xp_service
        self.content_repository = content_repository
        self.reward_policy = reward_policy
        self.uow = uow
        self.clock = clock
        self.default_limit = default_limit
        self.max_limit = max_limit

    def handle(self, message: ReviewSessionRequest) -> SessionHandle | ReviewOutcome:
        match message:
            case StartReviewSession():
                return self._start(message)
            case SubmitReview():
                return self._submit(message)
            case _:
                assert_never(message)

    def _start(self, message: StartReviewSession) -> SessionHandle:
        user_id = UserId(message.user_id)
        mode = parse_review_mode(message.mode)
        limit = validate_limit(
            self.default_limit if message.limit is None else message.limit, self.max_limit
        )
        now = self.clock.now()

        due_ids = [record.flashcard_id for record in self.scheduler_service.due_cards(user_id, now, limit)]
        struggling_ids = [
            entry.flashcard_id for entry in self.scheduler_service.struggling_cards(user_id, limit)
        ]
        selected = compose_session(due_ids, struggling_ids, limit)
        nodes = self.content_repository.get_many(selected)
        due = set(due_ids)

        cards = []
        for card_id in selected:
            node = nodes.get(card_id)
            if node is None:
                logger.warning("session_card_missing", user_id=user_id.value, flashcard_id=card_id.value)
                continue
            cards.append(
                SessionCard(
                    flashcard_id=card_id.value,
                    question=node.question,
                    answer=node.answer,
                    difficulty=node.difficulty,
                    reason="due" if card_id in due else "struggling",
                )
            )

        handle = SessionHandle(session_id=uuid.uuid4().hex, mode=mode, cards=cards)
        logger.info(
            "review_session_started",
            user_id=user_id.value,
            session_id=handle.session_id,
            mode=mode.value,
            card_count=len(cards),
        )
        return handle

    def _submit(self, message: SubmitReview) -> ReviewOutcome:
        user_id = UserId(message.user_id)
        flashcard_id = NodeId(message.flashcard_id)
        session_id = validate_session_id(message.session_id)
        mode = parse_review_mode(message.mode)

        flashcard = self.content_repository.get_node(flashcard_id)
        if flashcard is None or flashcard.kind is not NodeKind.FLASHCARD:
            raise EntityNotFoundError("Flashcard", flashcard_id.value)

        invalidates = tags(reviews_tag(user_id.value), stats_tag(user_id.value))
        now = self.clock.now()

        with self.uow:
            stored = self.submission_service.claim(session_id, flashcard_id, user_id, now)
            if stored is not None:
                return ReviewOutcome(
                    review=self.submission_service.replayed_review(stored),
                    xp_awarded=stored.xp_awarded,
                    duplicate=True,
                )

            record = self.scheduler_service.record_outcome(
                user_id, flashcard_id, message.is_correct, mode, now
            )
            xp = self.reward_policy.for_review(mode, message.is_correct)
            self.xp_service.credit(user_id, xp, XpSource.REVIEW, now, source_id=record.id.value)
            self.submission_service.complete(session_id, flashcard_id, record, xp)
            self.uow.commit()

        return ReviewOutcome(review=record, xp_awarded=xp, invalidates=invalidates)
