"""Tests for the scheduler and review sessions through the message bus."""

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from progression import models
from progression.application.common.errors import ErrorCode
from progression.application.common.invalidation import reviews_tag, stats_tag
from progression.application.common.message_bus import MessageBus
from progression.application.gamification.messages import GetTotalXp
from progression.application.review.messages import (
    AddToStrugglingQueue,
    GetDueCards,
    GetStrugglingCards,
    RecordOutcome,
    RemoveFromStrugglingQueue,
    StartReviewSession,
    SubmitReview,
)
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.review.entities.review_record import ReviewMode
from progression.infrastructure.review.repositories.struggling_repository import (
    StrugglingRepository,
)
from tests.conftest import OTHER_USER_ID, START, USER_ID, Course, FixedClock


def review_count(db_session: Session) -> int:
    return db_session.scalar(select(func.count()).select_from(models.ReviewRecord))


class TestRecordOutcome:
    def test_first_review_gets_initial_interval(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        record = bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()

        assert record.interval_days == 1
        assert record.next_review_date == START + timedelta(days=1)
        assert record.review_mode is ReviewMode.FLASHCARD

    def test_correct_answers_grow_the_interval(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        card = course.cards[course.lesson_1][0]
        intervals = []
        for _ in range(3):
            record = bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
            intervals.append(record.interval_days)
            clock.advance(days=record.interval_days)

        assert intervals == [1, 2, 4]

    def test_wrong_answer_resets_interval(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()

        record = bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()
        assert record.interval_days == 1

    def test_unknown_card_is_not_found(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=course.lesson_1, is_correct=True))
        assert result.unwrap_error().code is ErrorCode.NOT_FOUND

    def test_unknown_mode_is_rejected(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        result = bus.dispatch(
            RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True, mode="speedrun")
        )
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR


class TestStrugglingQueue:
    def test_failures_are_counted(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()

        entries = bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()
        assert [(entry.flashcard_id.value, entry.times_failed) for entry in entries] == [(card, 2)]

    def test_two_correct_answers_leave_the_queue(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        assert len(bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()) == 1

        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        assert bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap() == []

    def test_queue_is_per_user(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap()

        assert bus.dispatch(GetStrugglingCards(user_id=OTHER_USER_ID)).unwrap() == []

    def test_most_failed_cards_come_first(self, bus: MessageBus, course: Course) -> None:
        first, second = course.cards[course.lesson_1]
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=first)).unwrap()
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=second)).unwrap()
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=second)).unwrap()

        entries = bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()
        assert [entry.flashcard_id.value for entry in entries] == [second, first]

    def test_manual_add_and_remove(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        entry = bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap()
        assert entry.times_failed == 1

        assert bus.dispatch(RemoveFromStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap() is True
        assert bus.dispatch(RemoveFromStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap() is False

    def test_adding_unknown_card_is_not_found(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=99999))
        assert result.unwrap_error().code is ErrorCode.NOT_FOUND

    def test_correct_answers_before_manual_add_do_not_count(
        self, bus: MessageBus, course: Course
    ) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap()

        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        entries = bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()
        assert [entry.flashcard_id.value for entry in entries] == [card]

        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        assert bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap() == []

    def test_manual_add_on_a_later_day_resets_the_run(
        self, bus: MessageBus, course: Course, clock: FixedClock
    ) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        clock.advance(days=1)
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        clock.advance(days=1)
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=card)).unwrap()
        clock.advance(hours=1)

        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        assert len(bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()) == 1

    def test_failure_after_correct_answers_restarts_the_run(
        self, bus: MessageBus, course: Course
    ) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=False)).unwrap()
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()

        entries = bus.dispatch(GetStrugglingCards(user_id=USER_ID)).unwrap()
        assert [(entry.flashcard_id.value, entry.times_failed) for entry in entries] == [(card, 2)]

    def test_repeated_failures_in_one_transaction_share_a_row(
        self, db_session: Session, course: Course
    ) -> None:
        card = NodeId(course.cards[course.lesson_1][0])
        repository = StrugglingRepository(db_session)

        repository.record_failure(UserId(USER_ID), card, START)
        entry = repository.record_failure(UserId(USER_ID), card, START + timedelta(minutes=5))

        assert entry.times_failed == 2
        assert entry.last_failed_at == START + timedelta(minutes=5)
        rows = db_session.scalar(select(func.count()).select_from(models.StrugglingEntry))
        assert rows == 1


class TestDueCards:
    def test_card_becomes_due_after_interval(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        assert bus.dispatch(GetDueCards(user_id=USER_ID)).unwrap() == []

        clock.advance(days=1)
        due = bus.dispatch(GetDueCards(user_id=USER_ID)).unwrap()
        assert [record.flashcard_id.value for record in due] == [card]

    def test_only_latest_review_counts(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()
        clock.advance(days=1)
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=card, is_correct=True)).unwrap()

        clock.advance(days=1)
        assert bus.dispatch(GetDueCards(user_id=USER_ID)).unwrap() == []

    def test_most_overdue_first(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        first, second = course.cards[course.lesson_1]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=second, is_correct=True)).unwrap()
        clock.advance(hours=1)
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=first, is_correct=True)).unwrap()

        clock.advance(days=2)
        due = bus.dispatch(GetDueCards(user_id=USER_ID)).unwrap()
        assert [record.flashcard_id.value for record in due] == [second, first]

    def test_limit_is_validated(self, bus: MessageBus) -> None:
        result = bus.dispatch(GetDueCards(user_id=USER_ID, limit=0))
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR


class TestReviewSession:
    def test_empty_session_is_allowed(self, bus: MessageBus, course: Course) -> None:
        handle = bus.dispatch(StartReviewSession(user_id=USER_ID)).unwrap()
        assert handle.is_empty
        assert handle.session_id

    def test_session_serves_due_then_struggling_cards(
        self, bus: MessageBus, course: Course, clock: FixedClock
    ) -> None:
        due_card, struggling_card = course.cards[course.lesson_1]
        bus.dispatch(RecordOutcome(user_id=USER_ID, flashcard_id=due_card, is_correct=True)).unwrap()
        bus.dispatch(AddToStrugglingQueue(user_id=USER_ID, flashcard_id=struggling_card)).unwrap()
        clock.advance(days=1)

        handle = bus.dispatch(StartReviewSession(user_id=USER_ID, mode="recall")).unwrap()

        assert [(card.flashcard_id, card.reason) for card in handle.cards] == [
            (due_card, "due"),
            (struggling_card, "struggling"),
        ]
        assert handle.cards[0].question == f"Question {course.lesson_1}.0"
        assert handle.mode is ReviewMode.RECALL

    def test_submission_awards_xp(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        outcome = bus.dispatch(
            SubmitReview(user_id=USER_ID, session_id="s-1", flashcard_id=card, is_correct=True, mode="quiz")
        ).unwrap()

        assert outcome.xp_awarded == 15
        assert outcome.duplicate is False
        assert outcome.invalidates == {reviews_tag(USER_ID), stats_tag(USER_ID)}
        assert bus.dispatch(GetTotalXp(user_id=USER_ID)).unwrap() == 15

    def test_duplicate_submission_is_replayed(
        self, bus: MessageBus, course: Course, db_session: Session
    ) -> None:
        card = course.cards[course.lesson_1][0]
        message = SubmitReview(user_id=USER_ID, session_id="s-1", flashcard_id=card, is_correct=True)
        first = bus.dispatch(message).unwrap()
        second = bus.dispatch(message).unwrap()

        assert second.duplicate is True
        assert second.review.id == first.review.id
        assert second.xp_awarded == first.xp_awarded
        assert review_count(db_session) == 1
        assert bus.dispatch(GetTotalXp(user_id=USER_ID)).unwrap() == 10

    def test_same_card_in_new_session_is_a_new_review(
        self, bus: MessageBus, course: Course, db_session: Session
    ) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(SubmitReview(user_id=USER_ID, session_id="s-1", flashcard_id=card, is_correct=True)).unwrap()
        bus.dispatch(SubmitReview(user_id=USER_ID, session_id="s-2", flashcard_id=card, is_correct=True)).unwrap()

        assert review_count(db_session) == 2

    def test_session_of_another_user_is_forbidden(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        bus.dispatch(SubmitReview(user_id=USER_ID, session_id="s-1", flashcard_id=card, is_correct=True)).unwrap()

        result = bus.dispatch(
            SubmitReview(user_id=OTHER_USER_ID, session_id="s-1", flashcard_id=card, is_correct=True)
        )
        assert result.unwrap_error().code is ErrorCode.FORBIDDEN

    def test_blank_session_id_is_rejected(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        result = bus.dispatch(SubmitReview(user_id=USER_ID, session_id="  ", flashcard_id=card, is_correct=True))
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR
