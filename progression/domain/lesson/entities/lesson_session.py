"""
LessonSession entity: one user's pass through the flashcards of a lesson.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from progression.domain.common.entity import Entity
from progression.domain.common.exceptions import InvariantViolationError, ValidationError
from progression.domain.common.value_objects import LessonSessionId, NodeId, UserId, as_utc


class SessionStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    # Every card answered, waiting for CompleteLesson
    FINISHED = "finished"
    COMPLETED = "completed"
    FAILED = "failed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.FAILED, SessionStatus.ABANDONED)


@dataclass
class LessonSession(Entity[LessonSessionId]):
    """
    Server-side state of a lesson attempt.

    Cards are answered in order. The session key doubles as the idempotency
    key of the answers submitted through it.

    Business Rules:
    - At least one card
    - Only the current card can be answered, and only while active
    - A wrong answer that empties the hearts fails the session
    - Terminal sessions (completed, failed, abandoned) never change again
    """

    id: LessonSessionId
    user_id: UserId
    lesson_id: NodeId
    path_id: NodeId
    session_key: str
    status: SessionStatus
    card_ids: tuple[NodeId, ...]
    started_at: datetime
    last_activity_at: datetime
    current_index: int = 0
    correct_count: int = 0
    paused_at: datetime | None = None
    ended_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.card_ids:
            raise InvariantViolationError("LessonSession", "a session needs at least one card")
        if not 0 <= self.current_index <= len(self.card_ids):
            raise InvariantViolationError("LessonSession", "current_index is out of range")
        if not 0 <= self.correct_count <= self.current_index:
            raise InvariantViolationError("LessonSession", "correct_count exceeds answered cards")
        self.started_at = as_utc(self.started_at)
        self.last_activity_at = as_utc(self.last_activity_at)
        if self.paused_at is not None:
            self.paused_at = as_utc(self.paused_at)
        if self.ended_at is not None:
            self.ended_at = as_utc(self.ended_at)

    @property
    def total_count(self) -> int:
        return len(self.card_ids)

    @property
    def answered_count(self) -> int:
        return self.current_index

    @property
    def current_card_id(self) -> NodeId | None:
        if self.current_index >= len(self.card_ids):
            return None
        return self.card_ids[self.current_index]

    @property
    def progress_percent(self) -> int:
        return round(self.current_index * 100 / len(self.card_ids))

    @property
    def accuracy(self) -> int:
        if self.current_index == 0:
            return 0
        return round(self.correct_count * 100 / self.current_index)

    @property
    def is_open(self) -> bool:
        return not self.status.is_terminal

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return as_utc(now) - self.last_activity_at > ttl

    def ensure_answerable(self, flashcard_id: NodeId) -> None:
        """
        Raises:
            ValidationError: If the session isn't active or the card is out of turn
        """
        if self.status is not SessionStatus.ACTIVE:
            raise ValidationError(
                f"Lesson session is {self.status.value}", "session_id", self.session_key
            )
        if flashcard_id != self.current_card_id:
            raise ValidationError(
                "Flashcard is not the current card of the session", "flashcard_id", flashcard_id.value
            )

    def record_answer(
        self, flashcard_id: NodeId, is_correct: bool, hearts_remaining: int | None, now: datetime
    ) -> None:
        """
        Advance past the current card.

        Args:
            flashcard_id: The answered card, must be the current one
            is_correct: Whether the answer was right
            hearts_remaining: Hearts left on the path after the answer
            now: Answer time

        Raises:
            ValidationError: If the session isn't active or the card is out of turn
        """
        self.ensure_answerable(flashcard_id)
        self.current_index += 1
        if is_correct:
            self.correct_count += 1
        self.last_activity_at = as_utc(now)

        if not is_correct and hearts_remaining is not None and hearts_remaining <= 0:
            self.status = SessionStatus.FAILED
            self.ended_at = self.last_activity_at
        elif self.current_index == len(self.card_ids):
            self.status = SessionStatus.FINISHED

    def pause(self, now: datetime) -> bool:
        """Returns False if the session was already paused."""
        if self.status is SessionStatus.PAUSED:
            return False
        if self.status is not SessionStatus.ACTIVE:
            raise ValidationError(
                f"Cannot pause a {self.status.value} lesson session", "session_id", self.session_key
            )
        self.status = SessionStatus.PAUSED
        self.paused_at = as_utc(now)
        self.last_activity_at = self.paused_at
        return True

    def resume(self, now: datetime, ttl: timedelta) -> bool:
        """
        Pick a paused session back up.

        Returns:
            False if the session was already active

        Raises:
            ValidationError: If the session isn't paused, or sat paused longer than ``ttl``
        """
        if self.status is SessionStatus.ACTIVE:
            return False
        if self.status is not SessionStatus.PAUSED:
            raise ValidationError(
                f"Cannot resume a {self.status.value} lesson session", "session_id", self.session_key
            )
        if self.is_expired(now, ttl):
            raise ValidationError("Lesson session has expired", "session_id", self.session_key)
        self.status = SessionStatus.ACTIVE
        self.paused_at = None
        self.last_activity_at = as_utc(now)
        return True

    def abandon(self, now: datetime) -> None:
        if self.status.is_terminal:
            raise ValidationError(
                f"Cannot abandon a {self.status.value} lesson session", "session_id", self.session_key
            )
        self.status = SessionStatus.ABANDONED
        self.ended_at = as_utc(now)
        self.last_activity_at = self.ended_at

    def complete(self, now: datetime) -> None:
        """
        Close a session whose cards were all answered.

        Raises:
            ValidationError: If cards remain or the session already ended
        """
        if self.status is not SessionStatus.FINISHED:
            raise ValidationError(
                f"Cannot complete a {self.status.value} lesson session with "
                f"{self.answered_count} of {self.total_count} cards answered",
                "session_id",
                self.session_key,
            )
        self.status = SessionStatus.COMPLETED
        self.ended_at = as_utc(now)
        self.last_activity_at = self.ended_at

    @classmethod
    def start(
        cls,
        user_id: UserId,
        lesson_id: NodeId,
        path_id: NodeId,
        card_ids: list[NodeId],
        session_key: str,
        now: datetime,
    ) -> "LessonSession":
        """
        Create a new active session (ID will be 0 until persisted).

        Raises:
            ValidationError: If the lesson has no cards
        """
        if not card_ids:
            raise ValidationError("Cannot start a lesson with no flashcards", "lesson_id", lesson_id.value)
        started_at = as_utc(now)
        return cls(
            id=LessonSessionId.generate(),
            user_id=user_id,
            lesson_id=lesson_id,
            path_id=path_id,
            session_key=session_key,
            status=SessionStatus.ACTIVE,
            card_ids=tuple(card_ids),
            started_at=started_at,
            last_activity_at=started_at,
        )
