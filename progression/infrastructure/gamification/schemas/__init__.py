from .hearts_schemas import HeartsRefillResponse, HeartsResponse
from .streak_schemas import StreakResponse
from .xp_schemas import (
    DailyXpResponse,
    XpGrantRequest,
    XpGrantResponse,
    XpHistoryResponse,
    XpStatsResponse,
)

__all__ = [
    "DailyXpResponse",
    "HeartsRefillResponse",
    "HeartsResponse",
    "StreakResponse",
    "XpGrantRequest",
    "XpGrantResponse",
    "XpHistoryResponse",
    "XpStatsResponse",
]
