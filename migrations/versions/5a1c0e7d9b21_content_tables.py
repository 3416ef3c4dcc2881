"""content tables

Revision ID: 5a1c0e7d9b21
Revises:
Create Date: 2026-10-16 09:12:44.310522

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5a1c0e7d9b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, content, likes and comments."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("specialty", sa.Text(), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "content",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("summary", sa.String(length=500), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("author_id", sa.String(length=36), nullable=False),
        sa.Column("featured_image", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("review_state", sa.String(length=16), nullable=False),
        sa.Column("reviewed_by", sa.String(length=36), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.String(length=500), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('draft', 'published', 'archived')",
            name="ck_content_status",
        ),
        sa.CheckConstraint("views >= 0", name="ck_content_views"),
        sa.CheckConstraint(
            "(review_state = 'unreviewed' AND reviewed_by IS NULL AND reviewed_at IS NULL"
            " AND rejection_reason IS NULL)"
            " OR (review_state = 'approved' AND reviewed_by IS NOT NULL"
            " AND reviewed_at IS NOT NULL AND rejection_reason IS NULL AND is_approved)"
            " OR (review_state = 'rejected' AND reviewed_by IS NOT NULL"
            " AND reviewed_at IS NOT NULL AND rejection_reason IS NOT NULL"
            " AND NOT is_approved)",
            name="ck_content_review",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_category", "content", ["category"])
    op.create_index("ix_content_author_id", "content", ["author_id"])
    op.create_index(
        "ix_content_status_approved_created",
        "content",
        ["status", "is_approved", "created_at"],
    )
    op.create_table(
        "content_like",
        sa.Column("content_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["content_id"], ["content.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("content_id", "user_id"),
    )
    op.create_index("ix_content_like_content_id", "content_like", ["content_id"])
    op.create_table(
        "content_comment",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("content_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["content_id"], ["content.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_content_comment_content_id",
        "content_comment",
        ["content_id", "created_at"],
    )


def downgrade() -> None:
    """Drop all content tables."""
    op.drop_index("ix_content_comment_content_id", table_name="content_comment")
    op.drop_table("content_comment")
    op.drop_index("ix_content_like_content_id", table_name="content_like")
    op.drop_table("content_like")
    op.drop_index("ix_content_status_approved_created", table_name="content")
    op.drop_index("ix_content_author_id", table_name="content")
    op.drop_index("ix_content_category", table_name="content")
    op.drop_table("content")
    op.drop_table("app_user")
