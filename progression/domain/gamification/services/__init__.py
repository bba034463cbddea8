from .streak_calculator import StreakSummary, current_streak, summarize_streak
from .xp_reward_policy import XpRewardPolicy

__all__ = ["StreakSummary", "XpRewardPolicy", "current_streak", "summarize_streak"]
