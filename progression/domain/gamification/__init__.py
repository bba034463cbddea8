"""Gamification module domain layer: hearts, streaks and XP."""

from .entities import HeartsState, XpSource, XpTransaction
from .services import StreakSummary, XpRewardPolicy, current_streak, summarize_streak

__all__ = [
    "HeartsState",
    "StreakSummary",
    "XpRewardPolicy",
    "XpSource",
    "XpTransaction",
    "current_streak",
    "summarize_streak",
]
