"""content tags

Revision ID: 8d4e2b6f1a03
Revises: 5a1c0e7d9b21
Create Date: 2026-10-16 15:40:02.118734

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d4e2b6f1a03"
down_revision: Union[str, Sequence[str], None] = "5a1c0e7d9b21"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add one row per article tag and backfill it from ``content.tags``."""
    content_tag = op.create_table(
        "content_tag",
        sa.Column("content_id", sa.String(length=36), nullable=False),
        sa.Column("tag", sa.String(length=30), nullable=False),
        sa.ForeignKeyConstraint(["content_id"], ["content.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("content_id", "tag"),
    )
    op.create_index("ix_content_tag_tag", "content_tag", ["tag"])

    content = sa.table("content", sa.column("id", sa.String), sa.column("tags", sa.JSON))
    bind = op.get_bind()
    rows = [
        {"content_id": content_id, "tag": tag}
        for content_id, tags in bind.execute(sa.select(content.c.id, content.c.tags))
        for tag in dict.fromkeys(tags or [])
    ]
    if rows:
        op.bulk_insert(content_tag, rows)


def downgrade() -> None:
    """Drop the tag rows; ``content.tags`` still holds the full list."""
    op.drop_index("ix_content_tag_tag", table_name="content_tag")
    op.drop_table("content_tag")
