"""Use case for the lesson attempt flow: sessions, answers, hearts and completion."""

import uuid
from datetime import datetime, timedelta
from typing import assert_never

import structlog

from progression.application.common.clock import Clock
from progression.application.common.invalidation import (
    hearts_tag,
    progress_tag,
    reviews_tag,
    stats_tag,
    tags,
)
from progression.application.common.unit_of_work import UnitOfWork
from progression.application.gamification.services.hearts_service import HeartsService
from progression.application.gamification.services.streak_service import StreakService
from progression.application.gamification.services.xp_service import XpService
from progression.application.lesson.dtos import (
    AnswerOutcome,
    CompletionOutcome,
    LessonCard,
    LessonFlashcards,
    LessonProgress,
    LessonSessionView,
    LessonStart,
    SessionChange,
)
from progression.application.lesson.messages import (
    AbandonLesson,
    CompleteLesson,
    GetLessonFlashcards,
    GetLessonProgress,
    LessonRequest,
    PauseLesson,
    ResumeLesson,
    StartLesson,
    SubmitAnswer,
)
from progression.application.lesson.protocols.lesson_session_repository import (
    LessonSessionRepositoryProtocol,
)
from progression.application.progression.services.unlock_service import UnlockService
from progression.application.review.services.scheduler_service import SchedulerService
from progression.application.review.services.submission_service import (
    SubmissionService,
    validate_session_id,
)
from progression.domain.common.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    ValidationError,
)
from progression.domain.common.value_objects import NodeId, UserId, local_day
from progression.domain.content.entities.content_node import ContentNode, NodeKind
from progression.domain.gamification.entities.xp_transaction import XpSource
from progression.domain.gamification.services.xp_reward_policy import XpRewardPolicy
from progression.domain.lesson.entities.lesson_session import LessonSession
from progression.domain.progression.entities.progress_record import ProgressRecord
from progression.domain.review.entities.review_record import ReviewMode

logger = structlog.get_logger(__name__)

# Answers given inside a lesson are scheduled like quiz reviews
LESSON_REVIEW_MODE = ReviewMode.QUIZ

LessonResult = (
    LessonStart
    | LessonFlashcards
    | LessonProgress
    | SessionChange
    | AnswerOutcome
    | CompletionOutcome
)


class LessonUseCase:
    """Handles LessonRequest messages."""

    def __init__(
        self,
        unlock_service: UnlockService,
        scheduler_service: SchedulerService,
        submission_service: SubmissionService,
        hearts_service: HeartsService,
        xp_service: XpService,
        streak_service: StreakService,
        session_repository: LessonSessionRepositoryProtocol,
        reward_policy: XpRewardPolicy,
        uow: UnitOfWork,
        clock: Clock,
        session_ttl: timedelta,
    ) -> None:
        self.unlock_service = unlock_service
        self.scheduler_service = scheduler_service
        self.submission_service = submission_service
        self.hearts_service = hearts_service
        self.xp_service = xp_service
        self.streak_service = streak_service
        self.session_repository = session_repository
        self.reward_policy = reward_policy
        self.uow = uow
        self.clock = clock
        self.session_ttl = session_ttl

    def handle(self, message: LessonRequest) -> LessonResult:
        match message:
            case StartLesson():
                return self._start_lesson(message)
            case GetLessonFlashcards():
                return self._get_flashcards(message)
            case GetLessonProgress():
                return self._get_progress(message)
            case PauseLesson():
                return self._pause_lesson(message)
            case ResumeLesson():
                return self._resume_lesson(message)
            case AbandonLesson():
                return self._abandon_lesson(message)
            case SubmitAnswer():
                return self._submit_answer(message)
            case CompleteLesson():
                return self._complete_lesson(message)
            case _:
                assert_never(message)

    def _unlocked_lesson(self, user_id: UserId, lesson_id: NodeId) -> tuple[ContentNode, ContentNode]:
        """
        Load a lesson the user may enter, with its path.

        Raises:
            EntityNotFoundError: If the lesson doesn't exist
            AccessDeniedError: If the lesson is locked for this user
        """
        lesson = self.unlock_service.require_node(lesson_id, NodeKind.LESSON)
        decision = self.unlock_service.evaluate(user_id, lesson)
        if not decision.unlocked:
            raise AccessDeniedError(
                "Lesson is locked", lesson_id=lesson_id.value, reason=decision.reason
            )
        path = self.unlock_service.find_ancestor(lesson, NodeKind.PATH)
        if path is None:
            raise EntityNotFoundError("Path", f"of lesson {lesson_id.value}")
        return lesson, path

    def _flashcards(self, lesson: ContentNode) -> list[ContentNode]:
        children = self.unlock_service.content_repository.list_children(lesson.id)
        return [child for child in children if child.kind is NodeKind.FLASHCARD]

    def _open_session(self, user_id: UserId, lesson_id: NodeId) -> LessonSession:
        """
        The user's open session of a lesson, locked for update.

        Raises:
            EntityNotFoundError: If there is none
        """
        session = self.session_repository.find(user_id, lesson_id, for_update=True)
        if session is None or not session.is_open:
            raise EntityNotFoundError("LessonSession", f"open session of lesson {lesson_id.value}")
        return session

    def _owned_session(self, user_id: UserId, session_key: str) -> LessonSession:
        """
        Raises:
            EntityNotFoundError: If no session has this key
            AccessDeniedError: If the session belongs to another user
        """
        session = self.session_repository.find_by_key(session_key, for_update=True)
        if session is None:
            raise EntityNotFoundError("LessonSession", session_key)
        if session.user_id != user_id:
            raise AccessDeniedError("Session belongs to another user", session_id=session_key)
        return session

    def _start_lesson(self, message: StartLesson) -> LessonStart:
        user_id = UserId(message.user_id)
        lesson_id = NodeId(message.lesson_id)
        lesson, path = self._unlocked_lesson(user_id, lesson_id)
        now = self.clock.now()

        with self.uow:
            existing = self.session_repository.find(user_id, lesson.id, for_update=True)
            if existing is not None and existing.is_open and not existing.is_expired(now, self.session_ttl):
                session = existing
                reused = True
            else:
                flashcards = self._flashcards(lesson)
                session = self.session_repository.save(
                    LessonSession.start(
                        user_id,
                        lesson.id,
                        path.id,
                        [card.id for card in flashcards],
                        uuid.uuid4().hex,
                        now,
                    )
                )
                reused = False
            hearts = self.hearts_service.current(user_id, path.id, now)
            self.uow.commit()

        nodes = self.unlock_service.content_repository.get_many(session.card_ids)
        cards = [LessonCard.from_node(nodes[card_id]) for card_id in session.card_ids if card_id in nodes]
        logger.info(
            "lesson_started",
            user_id=user_id.value,
            lesson_id=lesson_id.value,
            session_id=session.session_key,
            existing=reused,
            cards=session.total_count,
        )
        return LessonStart(
            session=LessonSessionView.from_session(session),
            cards=cards,
            hearts_remaining=hearts.hearts_remaining,
            review_mode=LESSON_REVIEW_MODE,
            existing=reused,
            invalidates=frozenset() if reused else tags(progress_tag(user_id.value, path.id.value)),
        )

    def _get_flashcards(self, message: GetLessonFlashcards) -> LessonFlashcards:
        user_id = UserId(message.user_id)
        lesson, path = self._unlocked_lesson(user_id, NodeId(message.lesson_id))
        return LessonFlashcards(
            lesson_id=lesson.id.value,
            path_id=path.id.value,
            title=lesson.title,
            cards=[LessonCard.from_node(card) for card in self._flashcards(lesson)],
        )

    def _get_progress(self, message: GetLessonProgress) -> LessonProgress:
        user_id = UserId(message.user_id)
        lesson = self.unlock_service.require_node(NodeId(message.lesson_id), NodeKind.LESSON)
        path = self.unlock_service.find_ancestor(lesson, NodeKind.PATH)
        if path is None:
            raise EntityNotFoundError("Path", f"of lesson {lesson.id.value}")

        decision = self.unlock_service.evaluate(user_id, lesson)
        record = self.unlock_service.progress_repository.find(user_id, lesson.id)
        session = self.session_repository.find(user_id, lesson.id)
        return LessonProgress(
            lesson_id=lesson.id.value,
            path_id=path.id.value,
            unlocked=decision.unlocked,
            reason=decision.reason,
            completed=record is not None,
            best_score=record.score if record else None,
            completed_at=record.completed_at if record else None,
            session=LessonSessionView.from_session(session) if session else None,
        )

    def _pause_lesson(self, message: PauseLesson) -> SessionChange:
        user_id = UserId(message.user_id)
        lesson = self.unlock_service.require_node(NodeId(message.lesson_id), NodeKind.LESSON)
        now = self.clock.now()

        with self.uow:
            session = self._open_session(user_id, lesson.id)
            changed = session.pause(now)
            if changed:
                session = self.session_repository.save(session)
            self.uow.commit()

        logger.info(
            "lesson_paused",
            user_id=user_id.value,
            lesson_id=lesson.id.value,
            session_id=session.session_key,
            changed=changed,
        )
        return self._session_change(session, changed)

    def _resume_lesson(self, message: ResumeLesson) -> SessionChange:
        user_id = UserId(message.user_id)
        session_key = validate_session_id(message.session_id)
        now = self.clock.now()

        with self.uow:
            session = self._owned_session(user_id, session_key)
            # The lesson may have been locked again since the pause
            self._unlocked_lesson(user_id, session.lesson_id)
            changed = session.resume(now, self.session_ttl)
            if changed:
                session = self.session_repository.save(session)
            self.uow.commit()

        logger.info(
            "lesson_resumed",
            user_id=user_id.value,
            lesson_id=session.lesson_id.value,
            session_id=session_key,
            changed=changed,
        )
        return self._session_change(session, changed)

    def _abandon_lesson(self, message: AbandonLesson) -> SessionChange:
        user_id = UserId(message.user_id)
        lesson = self.unlock_service.require_node(NodeId(message.lesson_id), NodeKind.LESSON)
        now = self.clock.now()

        with self.uow:
            session = self._open_session(user_id, lesson.id)
            session.abandon(now)
            session = self.session_repository.save(session)
            self.uow.commit()

        logger.info(
            "lesson_abandoned",
            user_id=user_id.value,
            lesson_id=lesson.id.value,
            session_id=session.session_key,
            answered=session.answered_count,
            total=session.total_count,
        )
        return self._session_change(session, True)

    def _session_change(self, session: LessonSession, changed: bool) -> SessionChange:
        invalidates: frozenset[str] = frozenset()
        if changed:
            invalidates = tags(progress_tag(session.user_id.value, session.path_id.value))
        return SessionChange(
            session=LessonSessionView.from_session(session), changed=changed, invalidates=invalidates
        )

    def _lesson_session(self, user_id: UserId, lesson_id: NodeId, session_key: str) -> LessonSession | None:
        """
        The lesson session behind ``session_key``, or None for a plain idempotency key.

        Raises:
            AccessDeniedError: If the session belongs to another user
            ValidationError: If the session belongs to another lesson
        """
        session = self.session_repository.find_by_key(session_key, for_update=True)
        if session is None:
            return None
        if session.user_id != user_id:
            raise AccessDeniedError("Session belongs to another user", session_id=session_key)
        if session.lesson_id != lesson_id:
            raise ValidationError("Session belongs to another lesson", "session_id", session_key)
        return session

    def _submit_answer(self, message: SubmitAnswer) -> AnswerOutcome:
        user_id = UserId(message.user_id)
        lesson_id = NodeId(message.lesson_id)
        flashcard_id = NodeId(message.flashcard_id)
        session_id = validate_session_id(message.session_id) if message.session_id is not None else None
        if message.time_spent_seconds is not None and message.time_spent_seconds < 0:
            raise ValidationError(
                "time_spent_seconds cannot be negative", "time_spent_seconds", message.time_spent_seconds
            )

        lesson, path = self._unlocked_lesson(user_id, lesson_id)
        flashcard = self.unlock_service.content_repository.get_node(flashcard_id)
        if flashcard is None or flashcard.kind is not NodeKind.FLASHCARD or flashcard.parent_id != lesson.id:
            raise EntityNotFoundError("Flashcard", flashcard_id.value)

        now = self.clock.now()
        session: LessonSession | None = None
        with self.uow:
            if session_id is not None:
                stored = self.submission_service.claim(session_id, flashcard_id, user_id, now)
                session = self._lesson_session(user_id, lesson.id, session_id)
                if stored is not None:
                    return AnswerOutcome(
                        review=self.submission_service.replayed_review(stored),
                        xp_awarded=stored.xp_awarded,
                        hearts_remaining=stored.hearts_remaining,
                        path_id=path.id.value,
                        duplicate=True,
                        session=LessonSessionView.from_session(session) if session else None,
                    )
                if session is not None:
                    session.ensure_answerable(flashcard_id)

            record = self.scheduler_service.record_outcome(
                user_id, flashcard_id, message.is_correct, LESSON_REVIEW_MODE, now
            )
            xp = self.reward_policy.for_lesson_answer(message.is_correct)
            self.xp_service.credit(
                user_id, xp, XpSource.LESSON_ANSWER, now, source_id=record.id.value, path_id=path.id
            )
            if message.is_correct:
                hearts = self.hearts_service.current(user_id, path.id, now)
            else:
                # Raises InsufficientHeartsError, rolling back the record and XP above
                hearts = self.hearts_service.debit(user_id, path.id, now)

            if session is not None:
                session.record_answer(flashcard_id, message.is_correct, hearts.hearts_remaining, now)
                session = self.session_repository.save(session)
            if session_id is not None:
                self.submission_service.complete(
                    session_id, flashcard_id, record, xp, hearts.hearts_remaining
                )
            self.uow.commit()

        logger.info(
            "lesson_answer_submitted",
            user_id=user_id.value,
            lesson_id=lesson_id.value,
            flashcard_id=flashcard_id.value,
            is_correct=message.is_correct,
            hearts_remaining=hearts.hearts_remaining,
            session_status=session.status.value if session else None,
        )
        invalidates = tags(reviews_tag(user_id.value), stats_tag(user_id.value))
        if not message.is_correct:
            invalidates = tags(invalidates, hearts_tag(user_id.value, path.id.value))
        if session is not None:
            invalidates = tags(invalidates, progress_tag(user_id.value, path.id.value))
        return AnswerOutcome(
            review=record,
            xp_awarded=xp,
            hearts_remaining=hearts.hearts_remaining,
            path_id=path.id.value,
            session=LessonSessionView.from_session(session) if session else None,
            invalidates=invalidates,
        )

    def _check_counts(self, correct_count: int | None, total_count: int | None) -> tuple[int, int]:
        if correct_count is None or total_count is None:
            raise ValidationError(
                "correct_count and total_count are required without a session_id", "total_count", total_count
            )
        if total_count < 1:
            raise ValidationError("total_count must be at least 1", "total_count", total_count)
        if not 0 <= correct_count <= total_count:
            raise ValidationError(
                "correct_count must be between 0 and total_count", "correct_count", correct_count
            )
        return correct_count, total_count

    def _close_session(
        self, user_id: UserId, lesson_id: NodeId, session_key: str, message: CompleteLesson, now: datetime
    ) -> tuple[int, int]:
        """Mark a finished session completed and return its counts."""
        session = self._lesson_session(user_id, lesson_id, session_key)
        if session is None:
            raise EntityNotFoundError("LessonSession", session_key)
        session.complete(now)
        supplied = (message.correct_count, message.total_count)
        expected = (session.correct_count, session.total_count)
        pairs = zip(supplied, expected, strict=True)
        if any(value is not None and value != stored for value, stored in pairs):
            raise ValidationError(
                f"Counts don't match the session: {session.correct_count} of {session.total_count} correct",
                "correct_count",
                message.correct_count,
            )
        self.session_repository.save(session)
        return session.correct_count, session.total_count

    def _complete_lesson(self, message: CompleteLesson) -> CompletionOutcome:
        user_id = UserId(message.user_id)
        lesson_id = NodeId(message.lesson_id)
        session_key = validate_session_id(message.session_id) if message.session_id is not None else None
        if message.time_spent_seconds is not None and message.time_spent_seconds < 0:
            raise ValidationError(
                "time_spent_seconds cannot be negative", "time_spent_seconds", message.time_spent_seconds
            )

        lesson, path = self._unlocked_lesson(user_id, lesson_id)
        unit = self.unlock_service.find_ancestor(lesson, NodeKind.UNIT)
        now = self.clock.now()

        with self.uow:
            if session_key is not None:
                correct_count, total_count = self._close_session(
                    user_id, lesson.id, session_key, message, now
                )
            else:
                correct_count, total_count = self._check_counts(message.correct_count, message.total_count)
            score = round(correct_count * 100 / total_count)
            first_completion = self.unlock_service.progress_repository.find(user_id, lesson.id) is None

            candidates = self.unlock_service.successors(lesson)
            for ancestor in (unit, path):
                if ancestor is not None:
                    candidates.extend(self.unlock_service.successors(ancestor))
            locked_before = [
                node for node in candidates if not self.unlock_service.evaluate(user_id, node).unlocked
            ]

            stored = self.unlock_service.progress_repository.record_completion(
                ProgressRecord.create(user_id, lesson.id, NodeKind.LESSON, score, now)
            )
            unit_completed = unit is not None and self._cascade(user_id, unit, now)
            path_completed = unit_completed and self._cascade(user_id, path, now)

            xp = self.reward_policy.for_lesson_completion(lesson.xp_reward, score)
            self.xp_service.credit(
                user_id, xp, XpSource.LESSON_COMPLETION, now, source_id=lesson.id.value, path_id=path.id
            )

            newly_unlocked = [
                node.id.value
                for node in locked_before
                if self.unlock_service.evaluate(user_id, node).unlocked
            ]

            streak = self.streak_service.summary(user_id, now)
            streak_bonus = self.reward_policy.for_streak(streak.count)
            today = local_day(now, self.streak_service.tz)
            if streak_bonus and not self.xp_service.has_streak_bonus_on(user_id, today):
                self.xp_service.credit(user_id, streak_bonus, XpSource.STREAK_BONUS, now, path_id=path.id)
            else:
                streak_bonus = 0

            self.uow.commit()

        logger.info(
            "lesson_completed",
            user_id=user_id.value,
            lesson_id=lesson_id.value,
            score=score,
            first_completion=first_completion,
            newly_unlocked=newly_unlocked,
            unit_completed=unit_completed,
            path_completed=path_completed,
        )
        return CompletionOutcome(
            lesson_id=lesson_id.value,
            score=score,
            best_score=stored.score,
            first_completion=first_completion,
            xp_awarded=xp,
            streak=streak.count,
            streak_bonus=streak_bonus,
            unit_completed=unit_completed,
            path_completed=path_completed,
            newly_unlocked=newly_unlocked,
            invalidates=tags(progress_tag(user_id.value, path.id.value), stats_tag(user_id.value)),
        )

    def _cascade(self, user_id: UserId, parent: ContentNode, now: datetime) -> bool:
        """Record completion of ``parent`` once all its children are completed."""
        children = self.unlock_service.content_repository.list_children(parent.id)
        if not children:
            return False
        scores = self.unlock_service.progress_repository.scores_for(
            user_id, (child.id for child in children)
        )
        if len(scores) < len(children):
            return False
        average = round(sum(scores.values()) / len(scores))
        self.unlock_service.progress_repository.record_completion(
            ProgressRecord.create(user_id, parent.id, parent.kind, average, now)
        )
        return True
