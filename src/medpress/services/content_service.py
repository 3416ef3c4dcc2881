"""Content operations consumed by the web layer.

Each public method is one operation: it authorizes the actor, applies the
lifecycle rules, persists through the session and returns API schemas. Store
failures surface as :class:`~medpress.core.errors.InternalError`.
"""

from __future__ import annotations

import functools
import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any, ParamSpec, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from medpress.core.errors import (
    FieldError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from medpress.core.settings import settings
from medpress.domain.actor import Actor
from medpress.domain.content import ContentStatus
from medpress.models import Comment, Content, ContentLike
from medpress.schemas.content import (
    AuthorStats,
    CommentResponse,
    ContentCreate,
    ContentPage,
    ContentResponse,
    ContentSummary,
    ContentUpdate,
    LikeResponse,
)

from . import lifecycle
from .engagement import EngagementLedger
from .media import MediaStore, discard_quietly
from .presenters import to_comment_response, to_content_response, to_content_summary
from .query_builder import (
    ORDER_FEATURED,
    ORDER_NEWEST,
    ListingFilters,
    Pagination,
    build_conditions,
    clamp_limit,
    count_matching,
    page_info,
    select_with_counts,
)
from .visibility import is_visible, public_clause

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")
M = TypeVar("M", bound=BaseModel)

# Columns that can be cleared by sending null.
NULLABLE_FIELDS = frozenset({"featured_image"})


def store_operation(operation: Callable[P, R]) -> Callable[P, R]:
    """Map unexpected store failures onto ``InternalError``."""

    @functools.wraps(operation)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        service = args[0]
        try:
            return operation(*args, **kwargs)
        except SQLAlchemyError:
            logger.exception("Store failure in %s", operation.__name__)
            service.db.rollback()  # type: ignore[attr-defined]
            raise InternalError() from None

    return wrapper


def parse_id(raw: Any, what: str = "Content") -> str:
    """Normalise an identifier; malformed ids are indistinguishable from missing ones."""
    try:
        return str(uuid.UUID(str(raw)))
    except (TypeError, ValueError, AttributeError):
        raise NotFoundError(f"{what} not found") from None


def coerce(model: type[M], fields: M | Mapping[str, Any]) -> M:
    """Validate ``fields`` into ``model`` and report problems per field."""
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(fields)
    except PydanticValidationError as exc:
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "body",
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        raise ValidationError("Invalid content fields", errors) from None


class ContentService:
    """Content lifecycle, visibility and engagement operations."""

    def __init__(self, db: Session, media: MediaStore | None = None) -> None:
        self.db = db
        self.media = media
        self.ledger = EngagementLedger(db)

    # -- helpers -----------------------------------------------------------

    def _get(self, content_id: Any) -> Content:
        content = self.db.get(Content, parse_id(content_id))
        if content is None:
            raise NotFoundError("Content not found")
        return content

    def _get_visible(self, actor: Actor, content_id: Any) -> Content:
        content = self._get(content_id)
        if not is_visible(content, actor):
            raise NotFoundError("Content not found")
        return content

    def _detail(self, content: Content, actor: Actor) -> ContentResponse:
        return to_content_response(
            content,
            like_count=self.ledger.like_count(content.id),
            is_liked=self.ledger.is_liked_by(content.id, actor),
            comments=self.ledger.comments_for(content.id),
        )

    def _page(self, conditions: list, pagination: Pagination, order: str) -> ContentPage:
        total = self.db.scalar(count_matching(conditions)) or 0
        rows = self.db.execute(
            select_with_counts(conditions, order)
            .offset(pagination.offset)
            .limit(pagination.limit)
        ).unique()
        items = [to_content_summary(content, likes, comments) for content, likes, comments in rows]
        return ContentPage(items=items, pagination=page_info(total, pagination))

    def _summaries(self, conditions: list, order: str, limit: int) -> list[ContentSummary]:
        rows = self.db.execute(select_with_counts(conditions, order).limit(limit)).unique()
        return [to_content_summary(content, likes, comments) for content, likes, comments in rows]

    # -- lifecycle ---------------------------------------------------------

    @store_operation
    def create_content(
        self,
        actor: Actor,
        fields: ContentCreate | Mapping[str, Any],
    ) -> ContentResponse:
        """Create an item authored by ``actor``."""
        lifecycle.require_authenticated(actor)
        data = coerce(ContentCreate, fields)

        content = Content(
            title=data.title,
            body=data.body,
            summary=data.summary,
            category=data.category.value,
            tags=list(data.tags),
            featured_image=data.featured_image,
            status=data.status.value,
            views=0,
        )
        lifecycle.apply_create(content, actor)

        self.db.add(content)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            discard_quietly(self.media, data.featured_image)
            raise
        self.db.refresh(content)
        logger.info(
            "Content %s created by %s (%s, approved=%s)",
            content.id,
            actor.id,
            content.status,
            content.is_approved,
        )
        return self._detail(content, actor)

    @store_operation
    def get_content(self, actor: Actor, content_id: Any) -> ContentResponse:
        """Fetch one item, counting the view unless the author is reading."""
        content = self._get_visible(actor, content_id)
        self.ledger.record_view(content, actor)
        return self._detail(content, actor)

    @store_operation
    def update_content(
        self,
        actor: Actor,
        content_id: Any,
        fields: ContentUpdate | Mapping[str, Any],
    ) -> ContentResponse:
        """Apply a partial edit and recompute approval."""
        lifecycle.require_authenticated(actor)
        data = coerce(ContentUpdate, fields)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key in NULLABLE_FIELDS
        }
        content = self._get_visible(actor, content_id)
        previous_image = content.featured_image

        lifecycle.apply_edit(content, actor, changes)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            new_image = changes.get("featured_image")
            if new_image and new_image != previous_image:
                discard_quietly(self.media, new_image)
            raise
        self.db.refresh(content)
        logger.info("Content %s updated by %s", content.id, actor.id)
        return self._detail(content, actor)

    @store_operation
    def delete_content(self, actor: Actor, content_id: Any) -> None:
        """Delete an item and, best effort, its featured image."""
        content = self._get_visible(actor, content_id)
        lifecycle.require_author_or_admin(content, actor, "delete")

        image = content.featured_image
        content_key = content.id
        self.db.delete(content)
        self.db.commit()
        discard_quietly(self.media, image)
        logger.info("Content %s deleted by %s", content_key, actor.id)

    @store_operation
    def approve(self, actor: Actor, content_id: Any) -> ContentResponse:
        """Approve an item (admin only)."""
        lifecycle.require_admin(actor)
        content = self._get(content_id)
        lifecycle.approve(content, actor)
        self.db.commit()
        self.db.refresh(content)
        return self._detail(content, actor)

    @store_operation
    def reject(self, actor: Actor, content_id: Any, reason: str | None) -> ContentResponse:
        """Reject an item with a reason, returning it to draft (admin only)."""
        lifecycle.require_admin(actor)
        lifecycle.validate_reason(reason)
        content = self._get(content_id)
        lifecycle.reject(content, actor, reason)
        self.db.commit()
        self.db.refresh(content)
        return self._detail(content, actor)

    # -- listings ----------------------------------------------------------

    @store_operation
    def list_content(
        self,
        actor: Actor,
        filters: ListingFilters | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ContentPage:
        """Public listing; hidden items are filtered before counting."""
        filters = (filters or ListingFilters()).validated()
        pagination = Pagination.from_request(page, limit)
        return self._page(build_conditions(actor, filters), pagination, filters.order)

    @store_operation
    def list_own_content(
        self,
        actor: Actor,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ContentPage:
        """The caller's own items in any state."""
        lifecycle.require_authenticated(actor)
        filters = ListingFilters(status=status).validated()
        pagination = Pagination.from_request(page, limit)
        conditions = [Content.author_id == actor.id]
        if filters.status is not None:
            conditions.append(Content.status == filters.status)
        return self._page(conditions, pagination, ORDER_NEWEST)

    @store_operation
    def list_pending(
        self,
        actor: Actor,
        page: int | None = None,
        limit: int | None = None,
    ) -> ContentPage:
        """Published items awaiting approval (admin only)."""
        lifecycle.require_admin(actor)
        pagination = Pagination.from_request(page, limit)
        conditions = [
            Content.status == ContentStatus.PUBLISHED.value,
            Content.is_approved.is_(False),
        ]
        return self._page(conditions, pagination, ORDER_NEWEST)

    @store_operation
    def list_featured(self, actor: Actor, limit: int | None = None) -> list[ContentSummary]:
        """Most viewed public items."""
        limit = clamp_limit(settings.featured_limit if limit is None else limit)
        return self._summaries([public_clause()], ORDER_FEATURED, limit)

    @store_operation
    def list_related(
        self,
        actor: Actor,
        content_id: Any,
        limit: int | None = None,
    ) -> list[ContentSummary]:
        """Public items sharing the category of ``content_id``."""
        content = self._get_visible(actor, content_id)
        limit = clamp_limit(settings.related_limit if limit is None else limit)
        conditions = [
            public_clause(),
            Content.category == content.category,
            Content.id != content.id,
        ]
        return self._summaries(conditions, ORDER_NEWEST, limit)

    @store_operation
    def author_stats(self, actor: Actor) -> AuthorStats:
        """Totals over the caller's own items."""
        lifecycle.require_authenticated(actor)
        own = Content.author_id == actor.id
        total, published, drafts, views = self.db.execute(
            select(
                func.count(Content.id),
                func.coalesce(
                    func.sum(case((Content.status == ContentStatus.PUBLISHED.value, 1), else_=0)),
                    0,
                ),
                func.coalesce(
                    func.sum(case((Content.status == ContentStatus.DRAFT.value, 1), else_=0)),
                    0,
                ),
                func.coalesce(func.sum(Content.views), 0),
            ).where(own)
        ).one()
        likes = self.db.scalar(
            select(func.count())
            .select_from(ContentLike)
            .join(Content, Content.id == ContentLike.content_id)
            .where(own)
        )
        comments = self.db.scalar(
            select(func.count())
            .select_from(Comment)
            .join(Content, Content.id == Comment.content_id)
            .where(own)
        )
        return AuthorStats(
            total=total,
            published=published,
            drafts=drafts,
            total_views=views,
            total_likes=likes or 0,
            total_comments=comments or 0,
        )

    # -- engagement --------------------------------------------------------

    @store_operation
    def toggle_like(self, actor: Actor, content_id: Any) -> LikeResponse:
        """Like or unlike an item."""
        lifecycle.require_authenticated(actor)
        content = self._get_visible(actor, content_id)
        like_count, is_liked = self.ledger.toggle_like(content, actor)
        return LikeResponse(like_count=like_count, is_liked=is_liked)

    @store_operation
    def add_comment(self, actor: Actor, content_id: Any, text: str | None) -> CommentResponse:
        """Comment on a public item."""
        lifecycle.require_authenticated(actor)
        content = self._get_visible(actor, content_id)
        return to_comment_response(self.ledger.add_comment(content, actor, text))

    @store_operation
    def delete_comment(self, actor: Actor, content_id: Any, comment_id: Any) -> None:
        """Remove a comment from an item."""
        lifecycle.require_authenticated(actor)
        content = self._get_visible(actor, content_id)
        self.ledger.delete_comment(content, actor, parse_id(comment_id, "Comment"))
