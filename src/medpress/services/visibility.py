"""Who may see a content item.

:func:`is_visible` decides for a single loaded item. Listings show only
publicly engageable items and filter with :func:`public_clause` inside the
query, so hidden items never contribute to pagination counts.
"""

from __future__ import annotations

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from medpress.domain.actor import Actor
from medpress.domain.content import ContentStatus
from medpress.models import Content


def is_publicly_engageable(content: Content) -> bool:
    """Return True when the item is published and approved."""
    return content.status == ContentStatus.PUBLISHED and bool(content.is_approved)


def is_visible(content: Content, actor: Actor) -> bool:
    """Return True when ``actor`` may retrieve ``content``."""
    return actor.owns(content.author_id) or actor.is_admin or is_publicly_engageable(content)


def public_clause() -> ColumnElement[bool]:
    """SQL condition matching published and approved items."""
    return and_(
        Content.status == ContentStatus.PUBLISHED.value,
        Content.is_approved.is_(True),
    )
