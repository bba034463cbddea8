from .hearts_service import HeartsService
from .streak_service import StreakService
from .xp_service import XpService

__all__ = ["HeartsService", "StreakService", "XpService"]
