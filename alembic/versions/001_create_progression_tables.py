"""Create progression tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create content, progress, hearts, review and XP tables."""
    op.create_table(
        "content_nodes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("ordinal_position", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("question", sa.Text(), nullable=True),
        sa.Column("answer", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(20), nullable=True),
        sa.Column("xp_reward", sa.Integer(), nullable=True),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["parent_id"], ["content_nodes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("parent_id", "ordinal_position", name="uq_content_nodes_parent_position"),
        sa.CheckConstraint(
            "kind IN ('domain', 'path', 'unit', 'lesson', 'flashcard')", name="ck_content_nodes_kind"
        ),
        sa.CheckConstraint("ordinal_position >= 0", name="ck_content_nodes_position"),
    )
    op.create_index(op.f("ix_content_nodes_id"), "content_nodes", ["id"], unique=False)
    op.create_index(op.f("ix_content_nodes_parent_id"), "content_nodes", ["parent_id"], unique=False)

    op.create_table(
        "progress_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("node_id", sa.Integer(), nullable=False),
        sa.Column("node_kind", sa.String(20), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["node_id"], ["content_nodes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "node_id", name="uq_progress_records_user_node"),
        sa.CheckConstraint("score >= 0 AND score <= 100", name="ck_progress_records_score"),
    )
    op.create_index(op.f("ix_progress_records_id"), "progress_records", ["id"], unique=False)
    op.create_index(
        op.f("ix_progress_records_user_id"), "progress_records", ["user_id"], unique=False
    )

    op.create_table(
        "hearts_states",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("path_id", sa.Integer(), nullable=False),
        sa.Column("hearts_remaining", sa.Integer(), nullable=False),
        sa.Column("max_hearts", sa.Integer(), nullable=False),
        sa.Column("last_refill_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "path_id", name="uq_hearts_states_user_path"),
        sa.CheckConstraint(
            "hearts_remaining >= 0 AND hearts_remaining <= max_hearts",
            name="ck_hearts_states_bounds",
        ),
    )
    op.create_index(op.f("ix_hearts_states_id"), "hearts_states", ["id"], unique=False)

    op.create_table(
        "review_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("flashcard_id", sa.Integer(), nullable=False),
        sa.Column("review_mode", sa.String(20), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("review_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("next_review_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("interval_days", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["flashcard_id"], ["content_nodes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("interval_days >= 1", name="ck_review_records_interval"),
    )
    op.create_index(
        "ix_review_records_user_card_latest",
        "review_records",
        ["user_id", "flashcard_id", "review_date", "id"],
        unique=False,
    )
    op.create_index(
        "ix_review_records_user_date", "review_records", ["user_id", "review_date"], unique=False
    )

    op.create_table(
        "struggling_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("flashcard_id", sa.Integer(), nullable=False),
        sa.Column("times_failed", sa.Integer(), nullable=False),
        sa.Column("last_failed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["flashcard_id"], ["content_nodes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "flashcard_id", name="uq_struggling_entries_user_card"),
    )
    op.create_index(op.f("ix_struggling_entries_id"), "struggling_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_struggling_entries_user_id"), "struggling_entries", ["user_id"], unique=False
    )

    op.create_table(
        "xp_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(30), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=True),
        sa.Column("path_id", sa.Integer(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount >= 0", name="ck_xp_transactions_amount"),
    )
    op.create_index(op.f("ix_xp_transactions_id"), "xp_transactions", ["id"], unique=False)
    op.create_index(
        "ix_xp_transactions_user_occurred",
        "xp_transactions",
        ["user_id", "occurred_at"],
        unique=False,
    )

    op.create_table(
        "review_submissions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(64), nullable=False),
        sa.Column("flashcard_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("review_record_id", sa.Integer(), nullable=True),
        sa.Column("xp_awarded", sa.Integer(), nullable=False),
        sa.Column("hearts_remaining", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["review_record_id"], ["review_records.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "flashcard_id", name="uq_review_submissions_session_card"),
    )
    op.create_index(op.f("ix_review_submissions_id"), "review_submissions", ["id"], unique=False)


def downgrade() -> None:
    """Drop progression tables."""
    op.drop_index(op.f("ix_review_submissions_id"), table_name="review_submissions")
    op.drop_table("review_submissions")
    op.drop_index("ix_xp_transactions_user_occurred", table_name="xp_transactions")
    op.drop_index(op.f("ix_xp_transactions_id"), table_name="xp_transactions")
    op.drop_table("xp_transactions")
    op.drop_index(op.f("ix_struggling_entries_user_id"), table_name="struggling_entries")
    op.drop_index(op.f("ix_struggling_entries_id"), table_name="struggling_entries")
    op.drop_table("struggling_entries")
    op.drop_index("ix_review_records_user_date", table_name="review_records")
    op.drop_index("ix_review_records_user_card_latest", table_name="review_records")
    op.drop_table("review_records")
    op.drop_index(op.f("ix_hearts_states_id"), table_name="hearts_states")
    op.drop_table("hearts_states")
    op.drop_index(op.f("ix_progress_records_user_id"), table_name="progress_records")
    op.drop_index(op.f("ix_progress_records_id"), table_name="progress_records")
    op.drop_table("progress_records")
    op.drop_index(op.f("ix_content_nodes_parent_id"), table_name="content_nodes")
    op.drop_index(op.f("ix_content_nodes_id"), table_name="content_nodes")
    op.drop_table("content_nodes")
