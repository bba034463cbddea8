"""Hearts, streak and XP messages."""

from dataclasses import dataclass
from datetime import date

from progression.application.common.command import Command
from progression.application.common.query import Query

# Hearts


@dataclass(frozen=True)
class GetHearts(Query):
    user_id: int
    path_id: int


@dataclass(frozen=True)
class DebitHearts(Command):
    user_id: int
    path_id: int


@dataclass(frozen=True)
class RefillHearts(Command):
    user_id: int
    path_id: int


HeartsRequest = GetHearts | DebitHearts | RefillHearts

# Streak


@dataclass(frozen=True)
class GetCurrentStreak(Query):
    user_id: int


@dataclass(frozen=True)
class UpdateStreak(Command):
    """
    Recompute the streak after activity on a path.

    The streak itself is global to the user; ``path_id`` is only carried
    for logging and cache invalidation.
    """

    user_id: int
    path_id: int | None = None


StreakRequest = GetCurrentStreak | UpdateStreak

# XP


@dataclass(frozen=True)
class CreditXp(Command):
    user_id: int
    amount: int
    source: str
    source_id: int | None = None
    path_id: int | None = None


@dataclass(frozen=True)
class GetTotalXp(Query):
    user_id: int


@dataclass(frozen=True)
class GetDailyXp(Query):
    user_id: int
    day: date | None = None


@dataclass(frozen=True)
class GetWeeklyXp(Query):
    """XP over seven days from ``week_start`` (defaults to this week's Monday)."""

    user_id: int
    week_start: date | None = None


@dataclass(frozen=True)
class GetXpHistory(Query):
    user_id: int
    days: int = 7


XpRequest = CreditXp | GetTotalXp | GetDailyXp | GetWeeklyXp | GetXpHistory
