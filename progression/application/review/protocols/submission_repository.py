"""Protocol for idempotent answer submissions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from progression.domain.common.value_objects import NodeId, ReviewRecordId, UserId


@dataclass(frozen=True)
class StoredSubmission:
    """Outcome of an already-processed (session, flashcard) submission."""

    session_id: str
    flashcard_id: NodeId
    user_id: UserId
    review_record_id: ReviewRecordId | None
    xp_awarded: int
    hearts_remaining: int | None


class SubmissionRepositoryProtocol(Protocol):
    def claim(self, session_id: str, flashcard_id: NodeId, user_id: UserId, now: datetime) -> bool:
        """
        Reserve the idempotency key.

        Returns:
            True if this call inserted the key, False if it already existed
        """
        ...

    def find(self, session_id: str, flashcard_id: NodeId) -> StoredSubmission | None: ...

    def complete(
        self,
        session_id: str,
        flashcard_id: NodeId,
        review_record_id: ReviewRecordId,
        xp_awarded: int,
        hearts_remaining: int | None,
    ) -> None:
        """Store the outcome against a claimed key."""
        ...
