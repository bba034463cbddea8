"""Idempotency for answer submissions keyed by (session_id, flashcard_id)."""

from datetime import datetime

import structlog

from progression.application.review.protocols.review_repository import ReviewRepositoryProtocol
from progression.application.review.protocols.submission_repository import (
    StoredSubmission,
    SubmissionRepositoryProtocol,
)
from progression.domain.common.exceptions import (
    AccessDeniedError,
    ConcurrencyConflictError,
    EntityNotFoundError,
    ValidationError,
)
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.review.entities.review_record import ReviewRecord

logger = structlog.get_logger(__name__)

MAX_SESSION_ID_LENGTH = 64


def validate_session_id(session_id: str) -> str:
    session_id = session_id.strip()
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        raise ValidationError(
            f"session_id must be 1-{MAX_SESSION_ID_LENGTH} characters", "session_id", session_id
        )
    return session_id


class SubmissionService:
    def __init__(
        self,
        submission_repository: SubmissionRepositoryProtocol,
        review_repository: ReviewRepositoryProtocol,
    ) -> None:
        self.submission_repository = submission_repository
        self.review_repository = review_repository

    def claim(
        self, session_id: str, flashcard_id: NodeId, user_id: UserId, now: datetime
    ) -> StoredSubmission | None:
        """
        Claim the idempotency key.

        Returns:
            None if this is the first submission, otherwise the stored outcome
            of the earlier one

        Raises:
            AccessDeniedError: If the key was used by a different user
        """
        if self.submission_repository.claim(session_id, flashcard_id, user_id, now):
            return None

        stored = self.submission_repository.find(session_id, flashcard_id)
        if stored is None:
            # Claimed by a transaction that rolled back between our insert and read
            raise ConcurrencyConflictError("ReviewSubmission", f"{session_id}/{flashcard_id}")
        if stored.user_id != user_id:
            raise AccessDeniedError(
                "Session belongs to another user",
                session_id=session_id,
                flashcard_id=flashcard_id.value,
            )
        logger.info(
            "duplicate_submission",
            session_id=session_id,
            flashcard_id=flashcard_id.value,
            user_id=user_id.value,
        )
        return stored

    def replayed_review(self, stored: StoredSubmission) -> ReviewRecord:
        if stored.review_record_id is None:
            raise ConcurrencyConflictError("ReviewSubmission", f"{stored.session_id}/{stored.flashcard_id}")
        record = self.review_repository.get(stored.review_record_id)
        if record is None:
            raise EntityNotFoundError("ReviewRecord", stored.review_record_id.value)
        return record

    def complete(
        self,
        session_id: str,
        flashcard_id: NodeId,
        record: ReviewRecord,
        xp_awarded: int,
        hearts_remaining: int | None = None,
    ) -> None:
        self.submission_repository.complete(
            session_id, flashcard_id, record.id, xp_awarded, hearts_remaining
        )
