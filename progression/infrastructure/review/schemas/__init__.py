from .review_schemas import (
    DueCardResponse,
    DueCardsResponse,
    ReviewSessionRequest,
    ReviewSessionResponse,
    ReviewSubmitRequest,
    ReviewSubmitResponse,
    SessionCardResponse,
    StrugglingCardResponse,
    StrugglingCardsResponse,
    StrugglingRemoveResponse,
)

__all__ = [
    "DueCardResponse",
    "DueCardsResponse",
    "ReviewSessionRequest",
    "ReviewSessionResponse",
    "ReviewSubmitRequest",
    "ReviewSubmitResponse",
    "SessionCardResponse",
    "StrugglingCardResponse",
    "StrugglingCardsResponse",
    "StrugglingRemoveResponse",
]
