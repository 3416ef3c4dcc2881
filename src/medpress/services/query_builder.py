"""Translate listing filters into store queries.

Non-admin callers are always restricted to published, approved items; only an
admin may pick a different status. Pagination is offset based and clamps the
page size instead of rejecting it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy import Select, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from medpress.core.errors import FieldError, ValidationError
from medpress.core.settings import settings
from medpress.domain.actor import Actor
from medpress.domain.content import CATEGORIES, ContentStatus
from medpress.models import Comment, Content, ContentLike, ContentTag
from medpress.schemas.content import PageInfo

from .visibility import public_clause

ORDER_NEWEST = "newest"
ORDER_FEATURED = "featured"
ORDERINGS = (ORDER_NEWEST, ORDER_FEATURED)

SEARCH_MAX = 100
STATUSES = frozenset(status.value for status in ContentStatus)


@dataclass(frozen=True)
class ListingFilters:
    """Caller-supplied listing constraints; every field is optional."""

    category: str | None = None
    search: str | None = None
    author: str | None = None
    status: str | None = None
    order: str = ORDER_NEWEST

    def validated(self) -> ListingFilters:
        """Return a normalised copy or raise ``ValidationError``."""
        errors: list[tuple[str, str]] = []
        search = self.search.strip() if self.search else None
        if self.category is not None and self.category not in CATEGORIES:
            errors.append(("category", "Invalid category"))
        if search is not None and len(search) > SEARCH_MAX:
            errors.append(("search", f"Search term must be 1-{SEARCH_MAX} characters"))
        if self.status is not None and self.status not in STATUSES:
            errors.append(("status", "Invalid status"))
        if self.order not in ORDERINGS:
            errors.append(("order", f"Order must be one of: {', '.join(ORDERINGS)}"))
        if errors:
            raise _validation_error(errors)
        return ListingFilters(
            category=self.category,
            search=search or None,
            author=self.author or None,
            status=self.status,
            order=self.order,
        )


@dataclass(frozen=True)
class Pagination:
    """Validated page request."""

    page: int
    limit: int

    @classmethod
    def from_request(cls, page: int | None = None, limit: int | None = None) -> Pagination:
        page = 1 if page is None else page
        if page < 1:
            raise ValidationError.for_field("page", "Page must be a positive integer")
        limit = settings.default_page_size if limit is None else limit
        return cls(page=page, limit=clamp_limit(limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def clamp_limit(limit: int) -> int:
    """Clamp a requested page size to ``[1, max_page_size]``."""
    return max(1, min(limit, settings.max_page_size))


def page_info(total: int, pagination: Pagination) -> PageInfo:
    """Derive pagination metadata from the total count."""
    pages = math.ceil(total / pagination.limit) if total else 0
    return PageInfo(
        current=pagination.page,
        pages=pages,
        total=total,
        has_next=pagination.page < pages,
        has_prev=pagination.page > 1,
    )


def _validation_error(errors: list[tuple[str, str]]) -> ValidationError:
    return ValidationError(
        "Invalid listing filters",
        [FieldError(field=field, message=message) for field, message in errors],
    )


def _search_clause(term: str) -> ColumnElement[bool]:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(
        Content.title.ilike(pattern, escape="\\"),
        Content.body.ilike(pattern, escape="\\"),
        Content.tag_rows.any(ContentTag.tag.ilike(pattern, escape="\\")),
    )


def build_conditions(actor: Actor, filters: ListingFilters) -> list[ColumnElement[bool]]:
    """Return the WHERE conditions for a public listing."""
    filters = filters.validated()
    if actor.is_admin and filters.status is not None:
        conditions: list[ColumnElement[bool]] = [Content.status == filters.status]
    else:
        conditions = [public_clause()]
    if filters.category:
        conditions.append(Content.category == filters.category)
    if filters.author:
        conditions.append(Content.author_id == filters.author)
    if filters.search:
        conditions.append(_search_clause(filters.search))
    return conditions


def like_count_column() -> ColumnElement[int]:
    return (
        select(func.count())
        .where(ContentLike.content_id == Content.id)
        .correlate(Content)
        .scalar_subquery()
    )


def comment_count_column() -> ColumnElement[int]:
    return (
        select(func.count())
        .where(Comment.content_id == Content.id)
        .correlate(Content)
        .scalar_subquery()
    )


def select_with_counts(conditions: list[ColumnElement[bool]], order: str = ORDER_NEWEST) -> Select:
    """Select items with their like and comment counts in the requested order."""
    likes = like_count_column().label("like_count")
    comments = comment_count_column().label("comment_count")
    stmt = select(Content, likes, comments).where(*conditions)
    if order == ORDER_FEATURED:
        return stmt.order_by(Content.views.desc(), likes.desc(), Content.created_at.desc())
    return stmt.order_by(Content.created_at.desc(), Content.id.desc())


def count_matching(conditions: list[ColumnElement[bool]]) -> Select:
    """Select the number of items matching ``conditions``."""
    return select(func.count()).select_from(Content).where(*conditions)
