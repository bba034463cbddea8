"""Add lesson_sessions table, path unlock requirements and struggling anchors.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create lesson_sessions and add the new content and struggling columns."""
    op.add_column(
        "content_nodes",
        sa.Column("unlock_requirement_type", sa.String(30), nullable=True),
    )
    op.add_column(
        "content_nodes",
        sa.Column("unlock_requirement_value", sa.Integer(), nullable=True),
    )
    op.create_check_constraint(
        "ck_content_nodes_unlock_requirement",
        "content_nodes",
        "unlock_requirement_type IN ('none', 'previous_path', 'xp_threshold', 'admin_approval')",
    )

    # Entries queued before this revision count every later review
    op.add_column(
        "struggling_entries",
        sa.Column("anchor_review_id", sa.Integer(), nullable=True),
    )

    op.create_table(
        "lesson_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("lesson_id", sa.Integer(), nullable=False),
        sa.Column("path_id", sa.Integer(), nullable=False),
        sa.Column("session_key", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("card_ids", sa.JSON(), nullable=False),
        sa.Column("current_index", sa.Integer(), nullable=False),
        sa.Column("correct_count", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paused_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["lesson_id"], ["content_nodes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "lesson_id", name="uq_lesson_sessions_user_lesson"),
        sa.UniqueConstraint("session_key", name="uq_lesson_sessions_session_key"),
        sa.CheckConstraint(
            "status IN ('active', 'paused', 'finished', 'completed', 'failed', 'abandoned')",
            name="ck_lesson_sessions_status",
        ),
    )
    op.create_index(op.f("ix_lesson_sessions_id"), "lesson_sessions", ["id"], unique=False)


def downgrade() -> None:
    """Drop lesson_sessions and the added columns."""
    op.drop_index(op.f("ix_lesson_sessions_id"), table_name="lesson_sessions")
    op.drop_table("lesson_sessions")
    op.drop_column("struggling_entries", "anchor_review_id")
    op.drop_constraint("ck_content_nodes_unlock_requirement", "content_nodes", type_="check")
    op.drop_column("content_nodes", "unlock_requirement_value")
    op.drop_column("content_nodes", "unlock_requirement_type")
