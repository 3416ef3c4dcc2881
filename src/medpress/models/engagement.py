# src/medpress/models/engagement.py
"""Models capturing reader engagement with articles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medpress.db.session import Base
from medpress.db.time import utcnow


class ContentLike(Base):
    """A reader's like on an article.

    The composite primary key keeps at most one like per user per article.
    """

    __tablename__ = "content_like"
    __table_args__ = (Index("ix_content_like_content_id", "content_id"),)

    content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Comment(Base):
    """Comment attached to an article, kept in append order."""

    __tablename__ = "content_comment"
    __table_args__ = (Index("ix_content_comment_content_id", "content_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user = relationship(
        "User",
        primaryjoin="foreign(Comment.user_id) == User.id",
        lazy="joined",
        viewonly=True,
    )
