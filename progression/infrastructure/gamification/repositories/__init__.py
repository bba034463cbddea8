from .activity_repository import ActivityRepository
from .hearts_repository import HeartsRepository
from .xp_repository import XpRepository

__all__ = ["ActivityRepository", "HeartsRepository", "XpRepository"]
