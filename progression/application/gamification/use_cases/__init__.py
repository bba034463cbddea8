from .hearts_use_case import HeartsUseCase
from .streak_use_case import StreakUseCase
from .xp_use_case import XpUseCase

__all__ = ["HeartsUseCase", "StreakUseCase", "XpUseCase"]
