"""Views, likes and comments layered on top of a content item.

Counters and like membership are changed with single SQL statements
(``views = views + 1``, insert/delete on the like table) so concurrent requests
on the same item never lose updates.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medpress.core.errors import (
    AuthorizationError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from medpress.db.time import utcnow
from medpress.domain.actor import Actor
from medpress.models import Comment, Content, ContentLike
from medpress.models.content import new_id

from .lifecycle import require_authenticated
from .visibility import is_publicly_engageable

logger = logging.getLogger(__name__)

COMMENT_MAX = 1000


def _require_engageable(content: Content, action: str) -> None:
    if not is_publicly_engageable(content):
        raise PreconditionFailedError(f"Cannot {action} unpublished content")


def validate_comment(text: str | None) -> str:
    """Return the trimmed comment text or raise ``ValidationError``."""
    cleaned = (text or "").strip()
    if not 1 <= len(cleaned) <= COMMENT_MAX:
        raise ValidationError.for_field("content", f"Comment must be 1-{COMMENT_MAX} characters")
    return cleaned


class EngagementLedger:
    """Engagement operations against a single database session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def like_count(self, content_id: str) -> int:
        return self.db.scalar(
            select(func.count()).select_from(ContentLike).where(ContentLike.content_id == content_id)
        ) or 0

    def is_liked_by(self, content_id: str, actor: Actor) -> bool:
        if actor.id is None:
            return False
        return bool(
            self.db.scalar(
                select(
                    exists().where(
                        ContentLike.content_id == content_id,
                        ContentLike.user_id == actor.id,
                    )
                )
            )
        )

    def comments_for(self, content_id: str) -> list[Comment]:
        return list(
            self.db.scalars(
                select(Comment)
                .where(Comment.content_id == content_id)
                .order_by(Comment.created_at, Comment.id)
            ).unique()
        )

    def record_view(self, content: Content, actor: Actor) -> int:
        """Count a view by anyone but the author and return the resulting total."""
        if actor.owns(content.author_id):
            return content.views
        self.db.execute(
            update(Content)
            .where(Content.id == content.id)
            # A view is not an edit; keep updated_at unchanged.
            .values(views=Content.views + 1, updated_at=Content.updated_at)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(content)
        return content.views

    def toggle_like(self, content: Content, actor: Actor) -> tuple[int, bool]:
        """Like the item, or unlike it if the actor already holds a like.

        Returns:
            The resulting like count and whether the actor now likes the item.
        """
        require_authenticated(actor)
        _require_engageable(content, "like")
        content_id = content.id

        removed = self.db.execute(
            delete(ContentLike).where(
                ContentLike.content_id == content_id,
                ContentLike.user_id == actor.id,
            )
        ).rowcount
        if removed:
            self.db.commit()
            is_liked = False
        else:
            self.db.add(ContentLike(content_id=content_id, user_id=actor.id, created_at=utcnow()))
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                # Either a concurrent request already added this like, or the item
                # was deleted meanwhile and the foreign key rejected the row.
                if not self.is_liked_by(content_id, actor):
                    raise NotFoundError("Content not found") from None
            is_liked = True

        return self.like_count(content_id), is_liked

    def add_comment(self, content: Content, actor: Actor, text: str | None) -> Comment:
        """Append a comment and return it with the commenter's display data."""
        require_authenticated(actor)
        cleaned = validate_comment(text)
        _require_engageable(content, "comment on")

        comment = Comment(
            id=new_id(),
            content_id=content.id,
            user_id=actor.id,
            body=cleaned,
            created_at=utcnow(),
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.debug("Comment %s added to %s by %s", comment.id, content.id, actor.id)
        return comment

    def delete_comment(self, content: Content, actor: Actor, comment_id: str) -> None:
        """Remove a comment as its writer, the item's author, or an admin."""
        require_authenticated(actor)
        comment = self.db.scalar(
            select(Comment).where(Comment.id == comment_id, Comment.content_id == content.id)
        )
        if comment is None:
            raise NotFoundError("Comment not found")

        if not (
            actor.owns(comment.user_id) or actor.owns(content.author_id) or actor.is_admin
        ):
            raise AuthorizationError("Access denied")

        self.db.delete(comment)
        self.db.commit()
