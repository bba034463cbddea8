"""Tests for lesson sessions: start, answer, pause, resume, abandon and complete."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from progression import models
from progression.application.common.errors import ErrorCode
from progression.application.common.invalidation import progress_tag
from progression.application.common.message_bus import MessageBus
from progression.application.gamification.messages import GetHearts, GetTotalXp
from progression.application.lesson.messages import (
    AbandonLesson,
    CompleteLesson,
    GetLessonFlashcards,
    GetLessonProgress,
    PauseLesson,
    ResumeLesson,
    StartLesson,
    SubmitAnswer,
)
from progression.domain.lesson.entities.lesson_session import SessionStatus
from progression.domain.review.entities.review_record import ReviewMode
from tests.conftest import OTHER_USER_ID, USER_ID, Course, FixedClock, add_lesson, add_node


def start(bus: MessageBus, lesson_id: int, user_id: int = USER_ID):
    return bus.dispatch(StartLesson(user_id=user_id, lesson_id=lesson_id))


def answer(bus: MessageBus, lesson_id: int, card: int, is_correct: bool, session_id: str | None = None):
    return bus.dispatch(
        SubmitAnswer(
            user_id=USER_ID,
            lesson_id=lesson_id,
            flashcard_id=card,
            is_correct=is_correct,
            session_id=session_id,
        )
    )


def complete_plain(bus: MessageBus, lesson_id: int) -> None:
    bus.dispatch(
        CompleteLesson(user_id=USER_ID, lesson_id=lesson_id, correct_count=1, total_count=1)
    ).unwrap()


def reviews(db_session: Session) -> int:
    return db_session.scalar(select(func.count()).select_from(models.ReviewRecord))


class TestStartLesson:
    def test_new_session_starts_at_first_card(self, bus: MessageBus, course: Course) -> None:
        outcome = start(bus, course.lesson_1).unwrap()
        cards = course.cards[course.lesson_1]

        assert outcome.existing is False
        assert outcome.session.status is SessionStatus.ACTIVE
        assert outcome.session.current_flashcard_id == cards[0]
        assert outcome.session.total_count == 2
        assert outcome.session.progress_percent == 0
        assert [card.flashcard_id for card in outcome.cards] == cards
        assert outcome.cards[0].question == f"Question {course.lesson_1}.0"
        assert outcome.hearts_remaining == 5
        assert outcome.review_mode is ReviewMode.QUIZ
        assert outcome.invalidates == {progress_tag(USER_ID, course.path_a)}

    def test_open_session_is_handed_back(self, bus: MessageBus, course: Course) -> None:
        first = start(bus, course.lesson_1).unwrap()
        card = course.cards[course.lesson_1][0]
        answer(bus, course.lesson_1, card, True, first.session.session_id).unwrap()

        again = start(bus, course.lesson_1).unwrap()
        assert again.existing is True
        assert again.session.session_id == first.session.session_id
        assert again.session.answered_count == 1
        assert again.invalidates == frozenset()

    def test_locked_lesson_cannot_be_started(self, bus: MessageBus, course: Course) -> None:
        assert start(bus, course.lesson_2).unwrap_error().code is ErrorCode.FORBIDDEN
        assert start(bus, course.lesson_5).unwrap_error().code is ErrorCode.FORBIDDEN

    def test_lesson_without_flashcards_is_rejected(
        self, bus: MessageBus, course: Course, db_session: Session
    ) -> None:
        domain = add_node(db_session, "domain", None, 1)
        path = add_node(db_session, "path", domain.id, 0)
        unit = add_node(db_session, "unit", path.id, 0)
        empty, _ = add_lesson(db_session, unit.id, 0, cards=0)
        db_session.commit()

        assert start(bus, empty).unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_expired_session_is_replaced(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        first = start(bus, course.lesson_1).unwrap()
        clock.advance(hours=25)

        second = start(bus, course.lesson_1).unwrap()
        assert second.existing is False
        assert second.session.session_id != first.session.session_id


class TestSessionAnswers:
    def test_answers_advance_the_session(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        first_card, second_card = course.cards[course.lesson_1]

        first = answer(bus, course.lesson_1, first_card, True, session_id).unwrap()
        assert first.session.answered_count == 1
        assert first.session.progress_percent == 50
        assert first.session.current_flashcard_id == second_card
        assert progress_tag(USER_ID, course.path_a) in first.invalidates

        second = answer(bus, course.lesson_1, second_card, False, session_id).unwrap()
        assert second.session.status is SessionStatus.FINISHED
        assert second.session.current_flashcard_id is None
        assert second.session.accuracy == 50
        assert second.hearts_remaining == 4

    def test_card_out_of_turn_is_rejected(self, bus: MessageBus, course: Course, db_session: Session) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        second_card = course.cards[course.lesson_1][1]

        result = answer(bus, course.lesson_1, second_card, True, session_id)
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR
        assert reviews(db_session) == 0

    def test_retried_answer_does_not_advance_twice(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        card = course.cards[course.lesson_1][0]

        answer(bus, course.lesson_1, card, True, session_id).unwrap()
        retry = answer(bus, course.lesson_1, card, True, session_id).unwrap()

        assert retry.duplicate is True
        assert retry.session.answered_count == 1

    def test_session_of_another_lesson_is_rejected(self, bus: MessageBus, course: Course) -> None:
        complete_plain(bus, course.lesson_1)
        session_id = start(bus, course.lesson_2).unwrap().session.session_id
        card = course.cards[course.lesson_1][0]

        result = answer(bus, course.lesson_1, card, True, session_id)
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_running_out_of_hearts_fails_the_session(self, bus: MessageBus, course: Course) -> None:
        card = course.cards[course.lesson_1][0]
        for _ in range(4):
            answer(bus, course.lesson_1, card, False).unwrap()
        session_id = start(bus, course.lesson_1).unwrap().session.session_id

        outcome = answer(bus, course.lesson_1, card, False, session_id).unwrap()
        assert outcome.hearts_remaining == 0
        assert outcome.session.status is SessionStatus.FAILED

        completion = bus.dispatch(
            CompleteLesson(user_id=USER_ID, lesson_id=course.lesson_1, session_id=session_id)
        )
        assert completion.unwrap_error().code is ErrorCode.VALIDATION_ERROR

        retry = start(bus, course.lesson_1).unwrap()
        assert retry.existing is False
        assert retry.hearts_remaining == 0


class TestSessionCompletion:
    def test_counts_come_from_the_session(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        first_card, second_card = course.cards[course.lesson_1]
        answer(bus, course.lesson_1, first_card, True, session_id).unwrap()
        answer(bus, course.lesson_1, second_card, False, session_id).unwrap()

        outcome = bus.dispatch(
            CompleteLesson(user_id=USER_ID, lesson_id=course.lesson_1, session_id=session_id)
        ).unwrap()
        assert outcome.score == 50
        assert outcome.newly_unlocked == [course.lesson_2]

        progress = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert progress.completed is True
        assert progress.best_score == 50
        assert progress.session.status is SessionStatus.COMPLETED

    def test_unfinished_session_cannot_complete(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        answer(bus, course.lesson_1, course.cards[course.lesson_1][0], True, session_id).unwrap()

        result = bus.dispatch(
            CompleteLesson(user_id=USER_ID, lesson_id=course.lesson_1, session_id=session_id)
        )
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_counts_must_match_the_session(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        for card in course.cards[course.lesson_1]:
            answer(bus, course.lesson_1, card, True, session_id).unwrap()

        result = bus.dispatch(
            CompleteLesson(
                user_id=USER_ID,
                lesson_id=course.lesson_1,
                correct_count=1,
                total_count=2,
                session_id=session_id,
            )
        )
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_unknown_session_is_not_found(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(
            CompleteLesson(user_id=USER_ID, lesson_id=course.lesson_1, session_id="no-such-session")
        )
        assert result.unwrap_error().code is ErrorCode.NOT_FOUND

    def test_counts_are_required_without_a_session(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(CompleteLesson(user_id=USER_ID, lesson_id=course.lesson_1))
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR


class TestPauseAndResume:
    def test_pause_then_resume(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        clock.advance(minutes=5)

        paused = bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert paused.changed is True
        assert paused.session.status is SessionStatus.PAUSED
        assert paused.session.paused_at == clock.now()

        again = bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert again.changed is False
        assert again.invalidates == frozenset()

        clock.advance(hours=2)
        resumed = bus.dispatch(ResumeLesson(user_id=USER_ID, session_id=session_id)).unwrap()
        assert resumed.changed is True
        assert resumed.session.status is SessionStatus.ACTIVE
        assert resumed.session.paused_at is None

    def test_paused_session_takes_no_answers(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()

        result = answer(bus, course.lesson_1, course.cards[course.lesson_1][0], True, session_id)
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_expired_pause_cannot_resume(self, bus: MessageBus, course: Course, clock: FixedClock) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        clock.advance(hours=25)

        result = bus.dispatch(ResumeLesson(user_id=USER_ID, session_id=session_id))
        assert result.unwrap_error().code is ErrorCode.VALIDATION_ERROR

    def test_resume_checks_ownership(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()

        other = bus.dispatch(ResumeLesson(user_id=OTHER_USER_ID, session_id=session_id))
        assert other.unwrap_error().code is ErrorCode.FORBIDDEN

        unknown = bus.dispatch(ResumeLesson(user_id=USER_ID, session_id="no-such-session"))
        assert unknown.unwrap_error().code is ErrorCode.NOT_FOUND

    def test_pause_without_session_is_not_found(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(PauseLesson(user_id=USER_ID, lesson_id=course.lesson_1))
        assert result.unwrap_error().code is ErrorCode.NOT_FOUND


class TestAbandonLesson:
    def test_abandon_keeps_answers_and_hearts_spent(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        answer(bus, course.lesson_1, course.cards[course.lesson_1][0], False, session_id).unwrap()

        outcome = bus.dispatch(AbandonLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert outcome.session.status is SessionStatus.ABANDONED
        assert outcome.session.answered_count == 1
        assert outcome.invalidates == {progress_tag(USER_ID, course.path_a)}

        assert bus.dispatch(GetTotalXp(user_id=USER_ID)).unwrap() == 0
        assert bus.dispatch(GetHearts(user_id=USER_ID, path_id=course.path_a)).unwrap().hearts_remaining == 4
        progress = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert progress.completed is False

    def test_abandoned_session_is_closed(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        bus.dispatch(AbandonLesson(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()

        again = bus.dispatch(AbandonLesson(user_id=USER_ID, lesson_id=course.lesson_1))
        assert again.unwrap_error().code is ErrorCode.NOT_FOUND
        resumed = bus.dispatch(ResumeLesson(user_id=USER_ID, session_id=session_id))
        assert resumed.unwrap_error().code is ErrorCode.VALIDATION_ERROR


class TestLessonQueries:
    def test_flashcards_in_order(self, bus: MessageBus, course: Course) -> None:
        outcome = bus.dispatch(GetLessonFlashcards(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()

        assert outcome.path_id == course.path_a
        assert [card.flashcard_id for card in outcome.cards] == course.cards[course.lesson_1]
        assert outcome.cards[1].answer == f"Answer {course.lesson_1}.1"

    def test_flashcards_of_locked_lesson_are_forbidden(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(GetLessonFlashcards(user_id=USER_ID, lesson_id=course.lesson_2))
        assert result.unwrap_error().code is ErrorCode.FORBIDDEN

    def test_progress_of_untouched_lessons(self, bus: MessageBus, course: Course) -> None:
        first = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert first.unlocked is True
        assert first.completed is False
        assert first.best_score is None
        assert first.session is None

        second = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=course.lesson_2)).unwrap()
        assert second.unlocked is False
        assert second.reason == "predecessor_incomplete"

    def test_progress_shows_the_open_session(self, bus: MessageBus, course: Course) -> None:
        session_id = start(bus, course.lesson_1).unwrap().session.session_id
        answer(bus, course.lesson_1, course.cards[course.lesson_1][0], True, session_id).unwrap()

        progress = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=course.lesson_1)).unwrap()
        assert progress.session.session_id == session_id
        assert progress.session.progress_percent == 50

    def test_progress_of_unknown_lesson(self, bus: MessageBus, course: Course) -> None:
        result = bus.dispatch(GetLessonProgress(user_id=USER_ID, lesson_id=99999))
        assert result.unwrap_error().code is ErrorCode.NOT_FOUND

