from .activity_repository import ActivityRepositoryProtocol
from .hearts_repository import HeartsRepositoryProtocol
from .xp_repository import XpRepositoryProtocol

__all__ = [
    "ActivityRepositoryProtocol",
    "HeartsRepositoryProtocol",
    "XpRepositoryProtocol",
]
