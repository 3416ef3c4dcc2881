"""Status and approval transitions for content items.

Every function mutates a loaded :class:`~medpress.models.Content` in place and
leaves persistence to the caller.

Approval rules:

- Doctors and admins are trusted authors; their items are approved on
  creation, and stamped with approval details when published.
- Readers' items always start unapproved.
- An admin edit re-stamps approval; a doctor edit behaves like creation.
- A reader editing an item that is or becomes published sends it back to the
  moderation queue.
- Rejection forces the item back to draft.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from medpress.core.errors import AuthenticationRequired, AuthorizationError, ValidationError
from medpress.db.time import utcnow
from medpress.domain.actor import Actor
from medpress.domain.content import ContentStatus
from medpress.domain.review import UNREVIEWED, Approved, Rejected
from medpress.models import Content

logger = logging.getLogger(__name__)

# Fields an author may edit.
CONTENT_FIELDS = ("title", "body", "summary", "category", "tags", "featured_image", "status")
# Fields only an admin may set directly.
MODERATION_FIELDS = frozenset({"is_approved"})

REJECTION_REASON_MAX = 500


def require_authenticated(actor: Actor) -> None:
    """Raise unless the actor carries an identity."""
    if not actor.is_authenticated:
        raise AuthenticationRequired()


def require_admin(actor: Actor) -> None:
    """Raise unless the actor is an admin."""
    require_authenticated(actor)
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")


def require_author_or_admin(content: Content, actor: Actor, action: str) -> None:
    """Raise unless the actor wrote the item or is an admin."""
    require_authenticated(actor)
    if not (actor.owns(content.author_id) or actor.is_admin):
        raise AuthorizationError(f"Access denied. You can only {action} your own content.")


def _stamp_approval(content: Content, actor: Actor, now: datetime) -> None:
    content.is_approved = True
    content.review = Approved(by=actor.id, at=now)


def _mark_approved_unstamped(content: Content) -> None:
    content.is_approved = True
    if isinstance(content.review, Rejected):
        content.review = UNREVIEWED


def _reset_for_moderation(content: Content) -> None:
    content.is_approved = False
    content.review = UNREVIEWED


def apply_create(content: Content, actor: Actor, now: datetime | None = None) -> Content:
    """Initialise approval state for a freshly built item."""
    require_authenticated(actor)
    now = now or utcnow()
    content.author_id = actor.id
    content.review = UNREVIEWED
    if actor.is_privileged:
        content.is_approved = True
        if content.status == ContentStatus.PUBLISHED:
            content.review = Approved(by=actor.id, at=now)
    else:
        content.is_approved = False
    return content


def apply_edit(
    content: Content,
    actor: Actor,
    changes: Mapping[str, Any],
    now: datetime | None = None,
) -> Content:
    """Apply ``changes`` and recompute approval according to the editor's role."""
    require_author_or_admin(content, actor, "edit")
    if MODERATION_FIELDS.intersection(changes) and not actor.is_admin:
        raise AuthorizationError("Only admins can change moderation fields")

    now = now or utcnow()
    for field in CONTENT_FIELDS:
        if field in changes:
            setattr(content, field, changes[field])

    published = content.status == ContentStatus.PUBLISHED
    if "is_approved" in changes and changes["is_approved"] is not None:
        if changes["is_approved"]:
            _stamp_approval(content, actor, now)
        else:
            _reset_for_moderation(content)
    elif actor.is_admin:
        _stamp_approval(content, actor, now)
    elif actor.is_privileged:
        if published:
            _stamp_approval(content, actor, now)
        else:
            _mark_approved_unstamped(content)
    elif published:
        _reset_for_moderation(content)
    return content


def approve(content: Content, actor: Actor, now: datetime | None = None) -> Content:
    """Approve an item; idempotent and clears any rejection."""
    require_admin(actor)
    _stamp_approval(content, actor, now or utcnow())
    logger.info("Content %s approved by %s", content.id, actor.id)
    return content


def validate_reason(reason: str | None) -> str:
    """Return the trimmed rejection reason or raise ``ValidationError``."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError.for_field("reason", "Rejection reason is required")
    if len(cleaned) > REJECTION_REASON_MAX:
        raise ValidationError.for_field(
            "reason",
            f"Rejection reason must not exceed {REJECTION_REASON_MAX} characters",
        )
    return cleaned


def reject(
    content: Content,
    actor: Actor,
    reason: str | None,
    now: datetime | None = None,
) -> Content:
    """Reject an item and pull it back to draft."""
    require_admin(actor)
    cleaned = validate_reason(reason)
    content.status = ContentStatus.DRAFT.value
    content.is_approved = False
    content.review = Rejected(by=actor.id, at=now or utcnow(), reason=cleaned)
    logger.info("Content %s rejected by %s", content.id, actor.id)
    return content
