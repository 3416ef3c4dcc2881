# src/medpress/models/content.py
"""SQLAlchemy model for articles and their lifecycle state."""

from __future__ import annotations

import uuid
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
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from medpress.db.session import Base
from medpress.db.time import utcnow
from medpress.domain.content import ContentStatus
from medpress.domain.review import (
    UNREVIEWED,
    Approved,
    Rejected,
    Review,
    ReviewState,
)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


class Content(Base):
    """A single article ("blog") with its moderation state.

    Review details live in four columns that are only ever written together
    through :attr:`review`; the check constraints reject any combination that
    mixes approval and rejection data.
    """

    __tablename__ = "content"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'published', 'archived')",
            name="ck_content_status",
        ),
        CheckConstraint("views >= 0", name="ck_content_views"),
        CheckConstraint(
            "(review_state = 'unreviewed' AND reviewed_by IS NULL AND reviewed_at IS NULL"
            " AND rejection_reason IS NULL)"
            " OR (review_state = 'approved' AND reviewed_by IS NOT NULL"
            " AND reviewed_at IS NOT NULL AND rejection_reason IS NULL AND is_approved)"
            " OR (review_state = 'rejected' AND reviewed_by IS NOT NULL"
            " AND reviewed_at IS NOT NULL AND rejection_reason IS NOT NULL"
            " AND NOT is_approved)",
            name="ck_content_review",
        ),
        Index("ix_content_status_approved_created", "status", "is_approved", "created_at"),
        Index("ix_content_author_id", "author_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Set once at creation; never reassigned.
    author_id: Mapped[str] = mapped_column(String(36), nullable=False)
    featured_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ContentStatus.DRAFT.value
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    review_state: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReviewState.UNREVIEWED.value
    )
    reviewed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author = relationship(
        "User",
        primaryjoin="foreign(Content.author_id) == User.id",
        lazy="joined",
        viewonly=True,
    )
    likes = relationship(
        "ContentLike",
        cascade="all, delete-orphan",
        order_by="ContentLike.created_at",
    )
    comments = relationship(
        "Comment",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    # One row per distinct tag so search can match tag values rather than the JSON text.
    tag_rows = relationship("ContentTag", cascade="all, delete-orphan")

    @validates("tags")
    def _sync_tag_rows(self, key: str, tags: list[str] | None) -> list[str]:
        tags = list(tags or [])
        wanted = list(dict.fromkeys(tags))
        kept = {row.tag: row for row in self.tag_rows if row.tag in wanted}
        self.tag_rows = [kept.get(tag) or ContentTag(tag=tag) for tag in wanted]
        return tags

    @property
    def review(self) -> Review:
        """Return the review details as a tagged variant."""
        if self.review_state == ReviewState.APPROVED:
            return Approved(by=self.reviewed_by, at=self.reviewed_at)
        if self.review_state == ReviewState.REJECTED:
            return Rejected(
                by=self.reviewed_by,
                at=self.reviewed_at,
                reason=self.rejection_reason,
            )
        return UNREVIEWED

    @review.setter
    def review(self, value: Review) -> None:
        self.review_state = value.state.value
        if isinstance(value, Approved):
            self.reviewed_by, self.reviewed_at = value.by, value.at
            self.rejection_reason = None
        elif isinstance(value, Rejected):
            self.reviewed_by, self.reviewed_at = value.by, value.at
            self.rejection_reason = value.reason
        else:
            self.reviewed_by = self.reviewed_at = self.rejection_reason = None

    # Flattened review fields for response schemas.
    @property
    def approved_by(self) -> str | None:
        return self.reviewed_by if self.review_state == ReviewState.APPROVED else None

    @property
    def approved_at(self) -> datetime | None:
        return self.reviewed_at if self.review_state == ReviewState.APPROVED else None

    @property
    def rejected_by(self) -> str | None:
        return self.reviewed_by if self.review_state == ReviewState.REJECTED else None

    @property
    def rejected_at(self) -> datetime | None:
        return self.reviewed_at if self.review_state == ReviewState.REJECTED else None


class ContentTag(Base):
    """A single tag of an article, mirrored from :attr:`Content.tags`."""

    __tablename__ = "content_tag"
    __table_args__ = (Index("ix_content_tag_tag", "tag"),)

    content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(30), primary_key=True)


__all__ = ["Content", "ContentTag", "new_id"]
