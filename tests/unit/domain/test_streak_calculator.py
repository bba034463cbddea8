"""Tests for streak counting over activity days."""

from datetime import date, timedelta

import pytest

from progression.domain.gamification.services.streak_calculator import (
    current_streak,
    summarize_streak,
)

TODAY = date(2026, 3, 10)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in offsets]


class TestSummarizeStreak:
    def test_no_activity(self) -> None:
        summary = summarize_streak([], TODAY)
        assert summary.count == 0
        assert summary.active_today is False
        assert summary.last_activity_day is None

    def test_active_today_only(self) -> None:
        summary = summarize_streak(days_ago(0), TODAY)
        assert summary.count == 1
        assert summary.active_today is True

    def test_streak_survives_until_end_of_next_day(self) -> None:
        summary = summarize_streak(days_ago(1, 2, 3), TODAY)
        assert summary.count == 3
        assert summary.active_today is False
        assert summary.last_activity_day == TODAY - timedelta(days=1)

    def test_gap_of_a_full_day_breaks_the_streak(self) -> None:
        summary = summarize_streak(days_ago(2, 3, 4), TODAY)
        assert summary.count == 0
        assert summary.last_activity_day == TODAY - timedelta(days=2)

    def test_yesterday_anchors_a_run_broken_by_a_gap(self) -> None:
        summary = summarize_streak(days_ago(1, 3), TODAY)
        assert summary.count == 1
        assert summary.active_today is False

    def test_counts_only_the_latest_run(self) -> None:
        assert current_streak(days_ago(0, 1, 2, 4, 5, 6, 7), TODAY) == 3

    def test_future_days_are_ignored(self) -> None:
        assert current_streak([TODAY + timedelta(days=1), *days_ago(0, 1)], TODAY) == 2

    def test_reads_lazily(self) -> None:
        consumed: list[date] = []

        def stream():
            for day in days_ago(0, 1, 2, 4, 5, 6):
                consumed.append(day)
                yield day

        assert current_streak(stream(), TODAY) == 3
        assert len(consumed) == 4


class TestMilestones:
    @pytest.mark.parametrize(("count", "expected"), [(0, False), (6, False), (7, True), (14, True)])
    def test_is_milestone(self, count: int, expected: bool) -> None:
        summary = summarize_streak(days_ago(*range(count)), TODAY)
        assert summary.is_milestone is expected

    def test_days_until_next_milestone(self) -> None:
        summary = summarize_streak(days_ago(*range(5)), TODAY)
        assert summary.days_until_next_milestone == 2
