"""API routes for due cards, the struggling queue and review sessions."""

import logging

from fastapi import APIRouter, HTTPException, Query, Response, status

from progression.application.common.invalidation import reviews_tag, tags
from progression.application.review.dtos import ReviewOutcome, SessionHandle
from progression.application.review.messages import (
    AddToStrugglingQueue,
    GetDueCards,
    GetStrugglingCards,
    RemoveFromStrugglingQueue,
    StartReviewSession,
    SubmitReview,
)
from progression.domain.review.entities.review_record import ReviewRecord
from progression.domain.review.entities.struggling_entry import StrugglingEntry
from progression.infrastructure.common.di import MessageBusDep
from progression.infrastructure.common.responses import (
    EngineHTTPError,
    set_invalidation_header,
    unwrap_or_raise,
)
from progression.infrastructure.identity.dependencies import CurrentIdentity
from progression.infrastructure.review.schemas import (
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _struggling_response(entry: StrugglingEntry) -> StrugglingCardResponse:
    return StrugglingCardResponse(
        flashcard_id=entry.flashcard_id.value,
        times_failed=entry.times_failed,
        last_failed_at=entry.last_failed_at,
        added_at=entry.added_at,
    )


@router.get("/due", response_model=DueCardsResponse, status_code=status.HTTP_200_OK)
def get_due_cards(
    identity: CurrentIdentity,
    bus: MessageBusDep,
    limit: int = Query(20, description="Maximum number of cards"),
) -> DueCardsResponse:
    """Get cards whose next review date has passed, most overdue first."""
    records: list[ReviewRecord] = unwrap_or_raise(
        bus.dispatch(GetDueCards(user_id=identity.user_id, limit=limit))
    )
    return DueCardsResponse(
        cards=[
            DueCardResponse(
                flashcard_id=record.flashcard_id.value,
                last_review_id=record.id.value,
                last_reviewed_at=record.review_date,
                next_review_date=record.next_review_date,
                interval_days=record.interval_days,
            )
            for record in records
        ]
    )


@router.get("/struggling", response_model=StrugglingCardsResponse, status_code=status.HTTP_200_OK)
def get_struggling_cards(
    identity: CurrentIdentity,
    bus: MessageBusDep,
    limit: int = Query(20, description="Maximum number of cards"),
) -> StrugglingCardsResponse:
    entries: list[StrugglingEntry] = unwrap_or_raise(
        bus.dispatch(GetStrugglingCards(user_id=identity.user_id, limit=limit))
    )
    return StrugglingCardsResponse(cards=[_struggling_response(entry) for entry in entries])


@router.post(
    "/struggling/{flashcard_id}",
    response_model=StrugglingCardResponse,
    status_code=status.HTTP_200_OK,
)
def add_struggling_card(
    flashcard_id: int, response: Response, identity: CurrentIdentity, bus: MessageBusDep
) -> StrugglingCardResponse:
    """Put a card in the struggling queue, or count another failure if it's already there."""
    entry: StrugglingEntry = unwrap_or_raise(
        bus.dispatch(AddToStrugglingQueue(user_id=identity.user_id, flashcard_id=flashcard_id))
    )
    set_invalidation_header(response, tags(reviews_tag(identity.user_id)))
    return _struggling_response(entry)


@router.delete(
    "/struggling/{flashcard_id}",
    response_model=StrugglingRemoveResponse,
    status_code=status.HTTP_200_OK,
)
def remove_struggling_card(
    flashcard_id: int, response: Response, identity: CurrentIdentity, bus: MessageBusDep
) -> StrugglingRemoveResponse:
    removed: bool = unwrap_or_raise(
        bus.dispatch(RemoveFromStrugglingQueue(user_id=identity.user_id, flashcard_id=flashcard_id))
    )
    if removed:
        set_invalidation_header(response, tags(reviews_tag(identity.user_id)))
    return StrugglingRemoveResponse(success=True, removed=removed)


@router.post("/sessions", response_model=ReviewSessionResponse, status_code=status.HTTP_201_CREATED)
def start_review_session(
    request: ReviewSessionRequest, identity: CurrentIdentity, bus: MessageBusDep
) -> ReviewSessionResponse:
    """
    Start a review session over due and struggling cards.

    The returned session_id is the idempotency key for submissions.
    A session may have no cards.
    """
    try:
        handle: SessionHandle = unwrap_or_raise(
            bus.dispatch(
                StartReviewSession(user_id=identity.user_id, mode=request.mode, limit=request.limit)
            )
        )
        return ReviewSessionResponse(
            session_id=handle.session_id,
            mode=handle.mode.value,
            cards=[
                SessionCardResponse(
                    flashcard_id=card.flashcard_id,
                    question=card.question,
                    answer=card.answer,
                    difficulty=card.difficulty,
                    reason=card.reason,
                )
                for card in handle.cards
            ],
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to start review session for user {identity.user_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/sessions/{session_id}/submissions",
    response_model=ReviewSubmitResponse,
    status_code=status.HTTP_200_OK,
)
def submit_review(
    session_id: str,
    request: ReviewSubmitRequest,
    response: Response,
    identity: CurrentIdentity,
    bus: MessageBusDep,
) -> ReviewSubmitResponse:
    """
    Submit the outcome of reviewing a card.

    Submitting the same card twice in a session returns the first result.

    Raises:
        EngineHTTPError: 403 if the session belongs to another user
        HTTPException: If the submission fails unexpectedly
    """
    try:
        outcome: ReviewOutcome = unwrap_or_raise(
            bus.dispatch(
                SubmitReview(
                    user_id=identity.user_id,
                    session_id=session_id,
                    flashcard_id=request.flashcard_id,
                    is_correct=request.is_correct,
                    mode=request.mode,
                )
            )
        )
        set_invalidation_header(response, outcome.invalidates)
        return ReviewSubmitResponse(
            review_id=outcome.review.id.value,
            flashcard_id=outcome.review.flashcard_id.value,
            is_correct=outcome.review.is_correct,
            interval_days=outcome.review.interval_days,
            next_review_date=outcome.review.next_review_date,
            xp_awarded=outcome.xp_awarded,
            duplicate=outcome.duplicate,
        )
    except EngineHTTPError:
        raise
    except Exception as e:
        logger.error(f"Failed to submit review in session {session_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
