"""Tests for review interval scheduling."""

from datetime import UTC, datetime, timedelta

import pytest

from progression.domain.common.exceptions import ValidationError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.review.entities.review_record import ReviewMode, ReviewRecord
from progression.domain.review.services.spaced_repetition import SchedulingPolicy, compose_session

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def previous_review(interval_days: int) -> ReviewRecord:
    return ReviewRecord.create(
        user_id=UserId(1),
        flashcard_id=NodeId(5),
        review_mode=ReviewMode.FLASHCARD,
        is_correct=True,
        review_date=NOW - timedelta(days=interval_days),
        interval_days=interval_days,
    )


class TestNextInterval:
    def test_first_review_starts_at_initial_interval(self) -> None:
        policy = SchedulingPolicy()
        assert policy.next_interval(None, is_correct=True) == 1
        assert policy.next_interval(None, is_correct=False) == 1

    def test_correct_answer_doubles_interval(self) -> None:
        policy = SchedulingPolicy()
        assert policy.next_interval(previous_review(4), is_correct=True) == 8

    def test_wrong_answer_resets_interval(self) -> None:
        policy = SchedulingPolicy()
        assert policy.next_interval(previous_review(30), is_correct=False) == 1

    def test_fractional_growth_rounds_up(self) -> None:
        policy = SchedulingPolicy(growth_factor=1.5)
        assert policy.next_interval(previous_review(3), is_correct=True) == 5

    def test_interval_is_capped(self) -> None:
        policy = SchedulingPolicy(max_interval_days=60)
        assert policy.next_interval(previous_review(40), is_correct=True) == 60

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"growth_factor": 0.5},
            {"initial_interval_days": 0},
            {"initial_interval_days": 10, "max_interval_days": 5},
            {"struggling_exit_streak": 0},
        ],
    )
    def test_invalid_policy_is_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            SchedulingPolicy(**kwargs)


class TestSchedule:
    def test_schedule_sets_next_review_date(self) -> None:
        record = SchedulingPolicy().schedule(
            UserId(1), NodeId(5), ReviewMode.QUIZ, True, previous_review(2), NOW
        )

        assert record.interval_days == 4
        assert record.review_date == NOW
        assert record.next_review_date == NOW + timedelta(days=4)
        assert record.review_mode is ReviewMode.QUIZ
        assert not record.is_due(NOW)
        assert record.is_due(NOW + timedelta(days=4))


class TestLeavesStruggling:
    def test_needs_consecutive_correct_answers(self) -> None:
        policy = SchedulingPolicy(struggling_exit_streak=2)
        assert policy.leaves_struggling([True, True, False]) is True
        assert policy.leaves_struggling([True, False, True]) is False
        assert policy.leaves_struggling([True]) is False
        assert policy.leaves_struggling([]) is False


class TestComposeSession:
    def test_due_cards_first_without_duplicates(self) -> None:
        due = [NodeId(1), NodeId(2)]
        struggling = [NodeId(2), NodeId(3), NodeId(4)]
        assert compose_session(due, struggling, limit=10) == [NodeId(1), NodeId(2), NodeId(3), NodeId(4)]

    def test_limit_applies(self) -> None:
        assert compose_session([NodeId(1), NodeId(2)], [NodeId(3)], limit=2) == [NodeId(1), NodeId(2)]
