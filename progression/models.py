"""Database models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from progression.database import Base


class ContentNode(Base):
    """Node of the learning hierarchy. Written by content authoring, read here."""

    __tablename__ = "content_nodes"
    __table_args__ = (
        UniqueConstraint("parent_id", "ordinal_position", name="uq_content_nodes_parent_position"),
        CheckConstraint(
            "kind IN ('domain', 'path', 'unit', 'lesson', 'flashcard')", name="ck_content_nodes_kind"
        ),
        CheckConstraint("ordinal_position >= 0", name="ck_content_nodes_position"),
        CheckConstraint(
            "unlock_requirement_type IN ('none', 'previous_path', 'xp_threshold', 'admin_approval')",
            name="ck_content_nodes_unlock_requirement",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("content_nodes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    ordinal_position: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    question: Mapped[str | None] = mapped_column(Text, nullable=True)
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    xp_reward: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unlock_requirement_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    unlock_requirement_value: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<ContentNode(id={self.id}, kind='{self.kind}', position={self.ordinal_position})>"


class ProgressRecord(Base):
    """Completion of a lesson, unit or path by a user."""

    __tablename__ = "progress_records"
    __table_args__ = (
        UniqueConstraint("user_id", "node_id", name="uq_progress_records_user_node"),
        CheckConstraint("score >= 0 AND score <= 100", name="ck_progress_records_score"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    node_id: Mapped[int] = mapped_column(
        ForeignKey("content_nodes.id", ondelete="CASCADE"), nullable=False
    )
    node_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ProgressRecord(user_id={self.user_id}, node_id={self.node_id}, score={self.score})>"


class HeartsState(Base):
    """Hearts for a (user, path). ``version`` guards concurrent writes."""

    __tablename__ = "hearts_states"
    __table_args__ = (
        UniqueConstraint("user_id", "path_id", name="uq_hearts_states_user_path"),
        CheckConstraint(
            "hearts_remaining >= 0 AND hearts_remaining <= max_hearts",
            name="ck_hearts_states_bounds",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    path_id: Mapped[int] = mapped_column(Integer, nullable=False)
    hearts_remaining: Mapped[int] = mapped_column(Integer, nullable=False)
    max_hearts: Mapped[int] = mapped_column(Integer, nullable=False)
    last_refill_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<HeartsState(user_id={self.user_id}, path_id={self.path_id}, "
            f"hearts={self.hearts_remaining}/{self.max_hearts})>"
        )


class ReviewRecord(Base):
    """Append-only review attempt."""

    __tablename__ = "review_records"
    __table_args__ = (
        Index(
            "ix_review_records_user_card_latest",
            "user_id",
            "flashcard_id",
            "review_date",
            "id",
        ),
        Index("ix_review_records_user_date", "user_id", "review_date"),
        CheckConstraint("interval_days >= 1", name="ck_review_records_interval"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    flashcard_id: Mapped[int] = mapped_column(
        ForeignKey("content_nodes.id", ondelete="CASCADE"), nullable=False
    )
    review_mode: Mapped[str] = mapped_column(String(20), nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    review_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    next_review_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    interval_days: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ReviewRecord(id={self.id}, user_id={self.user_id}, "
            f"flashcard_id={self.flashcard_id}, correct={self.is_correct})>"
        )


class StrugglingEntry(Base):
    """A card in a user's struggling queue."""

    __tablename__ = "struggling_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "flashcard_id", name="uq_struggling_entries_user_card"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    flashcard_id: Mapped[int] = mapped_column(
        ForeignKey("content_nodes.id", ondelete="CASCADE"), nullable=False
    )
    times_failed: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_failed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    anchor_review_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<StrugglingEntry(user_id={self.user_id}, flashcard_id={self.flashcard_id}, "
            f"times_failed={self.times_failed})>"
        )


class XpTransaction(Base):
    """XP ledger entry."""

    __tablename__ = "xp_transactions"
    __table_args__ = (
        Index("ix_xp_transactions_user_occurred", "user_id", "occurred_at"),
        CheckConstraint("amount >= 0", name="ck_xp_transactions_amount"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(30), nullable=False)
    source_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    path_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<XpTransaction(id={self.id}, user_id={self.user_id}, amount={self.amount})>"


class ReviewSubmission(Base):
    """Idempotency record for an answer submitted within a session."""

    __tablename__ = "review_submissions"
    __table_args__ = (
        UniqueConstraint("session_id", "flashcard_id", name="uq_review_submissions_session_card"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False)
    flashcard_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    review_record_id: Mapped[int | None] = mapped_column(
        ForeignKey("review_records.id", ondelete="SET NULL"), nullable=True
    )
    xp_awarded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hearts_remaining: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ReviewSubmission(session_id='{self.session_id}', flashcard_id={self.flashcard_id})>"


class LessonSession(Base):
    """A user's current or last attempt at a lesson."""

    __tablename__ = "lesson_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_sessions_user_lesson"),
        UniqueConstraint("session_key", name="uq_lesson_sessions_session_key"),
        CheckConstraint(
            "status IN ('active', 'paused', 'finished', 'completed', 'failed', 'abandoned')",
            name="ck_lesson_sessions_status",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    lesson_id: Mapped[int] = mapped_column(
        ForeignKey("content_nodes.id", ondelete="CASCADE"), nullable=False
    )
    path_id: Mapped[int] = mapped_column(Integer, nullable=False)
    session_key: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    card_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False)
    current_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_activity_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<LessonSession(user_id={self.user_id}, lesson_id={self.lesson_id}, "
            f"status='{self.status}', index={self.current_index})>"
        )
