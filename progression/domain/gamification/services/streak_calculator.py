"""
Streak calculation over calendar days of activity.

The streak is the number of consecutive days with activity ending today. If
there is no activity yet today, yesterday still counts as the anchor so the
streak isn't shown as broken before the day is over.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

MILESTONE_EVERY = 7


@dataclass(frozen=True)
class StreakSummary:
    count: int
    active_today: bool
    last_activity_day: date | None

    @property
    def is_milestone(self) -> bool:
        return self.count > 0 and self.count % MILESTONE_EVERY == 0

    @property
    def days_until_next_milestone(self) -> int:
        return MILESTONE_EVERY - (self.count % MILESTONE_EVERY)


def summarize_streak(days_desc: Iterable[date], today: date) -> StreakSummary:
    """
    Walk activity days newest first and count the current streak.

    Args:
        days_desc: Distinct activity days in descending order. May be a lazy
            iterator; only as many days as the streak is long are consumed.
        today: The current calendar day in the streak timezone

    Returns:
        StreakSummary for the user
    """
    yesterday = today - timedelta(days=1)
    count = 0
    expected = today
    last_activity: date | None = None
    active_today = False

    for day in days_desc:
        if day > today:
            continue
        if last_activity is None:
            last_activity = day
            active_today = day == today
            if day < yesterday:
                break
            expected = day
        if day == expected:
            count += 1
            expected = day - timedelta(days=1)
        elif day < expected:
            break

    return StreakSummary(count=count, active_today=active_today, last_activity_day=last_activity)


def current_streak(days_desc: Iterable[date], today: date) -> int:
    return summarize_streak(days_desc, today).count
