# tests/test_content_service.py
"""Content operations against a real session."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from medpress.core.errors import (
    AuthenticationRequired,
    AuthorizationError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from medpress.domain.actor import Actor
from medpress.models import Content
from medpress.services.content_service import ContentService, parse_id

MISSING_ID = "7f0c7c2e-1111-4111-8111-111111111111"


def _create(service: ContentService, actor: Actor, fields: dict[str, Any], **overrides: Any):
    return service.create_content(actor, {**fields, **overrides})


def test_doctor_published_create_is_public(service, doctor, anonymous, content_fields) -> None:
    created = _create(service, doctor, content_fields, status="published")

    assert created.is_approved is True
    assert created.approved_by == doctor.id
    assert created.approved_at is not None
    assert created.author.name == "Dr. Ada"

    fetched = service.get_content(anonymous, created.id)
    assert fetched.id == created.id


def test_reader_published_create_is_pending(
    service, reader, anonymous, admin, content_fields
) -> None:
    created = _create(service, reader, content_fields, status="published")

    assert created.is_approved is False
    with pytest.raises(NotFoundError):
        service.get_content(anonymous, created.id)
    assert service.get_content(admin, created.id).id == created.id


def test_create_trims_and_validates_fields(service, doctor, content_fields) -> None:
    created = _create(service, doctor, content_fields, title="   Hydration facts   ")
    assert created.title == "Hydration facts"
    assert created.status == "draft"

    with pytest.raises(ValidationError) as excinfo:
        _create(service, doctor, content_fields, title="shrt", category="astrology")
    fields = {error.field for error in excinfo.value.errors}
    assert {"title", "category"} <= fields


def test_create_rejects_archived_status(service, doctor, content_fields) -> None:
    with pytest.raises(ValidationError):
        _create(service, doctor, content_fields, status="archived")


def test_anonymous_cannot_create(service, anonymous, content_fields) -> None:
    with pytest.raises(AuthenticationRequired):
        _create(service, anonymous, content_fields)


def test_hidden_content_is_not_found_for_others(
    service, reader, other_reader, anonymous, content_fields
) -> None:
    draft = _create(service, reader, content_fields)

    for actor in (anonymous, other_reader):
        with pytest.raises(NotFoundError) as hidden:
            service.get_content(actor, draft.id)
        with pytest.raises(NotFoundError) as missing:
            service.get_content(actor, MISSING_ID)
        assert hidden.value.message == missing.value.message


@pytest.mark.parametrize("raw", ["not-a-uuid", "", None, 42])
def test_malformed_ids_are_not_found(service, anonymous, raw) -> None:
    with pytest.raises(NotFoundError):
        service.get_content(anonymous, raw)


def test_parse_id_normalises_case() -> None:
    assert parse_id(MISSING_ID.upper()) == MISSING_ID


def test_author_always_fetches_own_content(service, reader, admin, content_fields) -> None:
    draft = _create(service, reader, content_fields)
    published = _create(service, reader, content_fields, status="published")
    service.reject(admin, published.id, "needs sources")

    for item in (draft, published):
        assert service.get_content(reader, item.id).id == item.id


def test_views_count_other_readers_only(
    service, doctor, reader, anonymous, content_fields
) -> None:
    created = _create(service, doctor, content_fields, status="published")

    seen = [service.get_content(reader, created.id).views for _ in range(2)]
    seen.append(service.get_content(anonymous, created.id).views)
    own = service.get_content(doctor, created.id).views

    assert seen == [1, 2, 3]
    assert own == 3


def test_update_by_reader_author_requires_remoderation(
    service, reader, admin, anonymous, content_fields
) -> None:
    created = _create(service, reader, content_fields, status="published")
    service.approve(admin, created.id)
    assert service.get_content(anonymous, created.id).is_approved is True

    updated = service.update_content(reader, created.id, {"title": "Allergy season update"})

    assert updated.title == "Allergy season update"
    assert updated.is_approved is False
    assert updated.approved_by is None
    with pytest.raises(NotFoundError):
        service.get_content(anonymous, created.id)


def test_update_ignores_nulls_but_clears_image(service, doctor, content_fields) -> None:
    created = _create(
        service,
        doctor,
        content_fields,
        featured_image="https://cdn.example.org/uploads/images/pollen.jpg",
    )

    updated = service.update_content(
        doctor, created.id, {"title": None, "featured_image": None}
    )

    assert updated.title == created.title
    assert updated.featured_image is None


def test_update_by_stranger_is_forbidden(
    service, doctor, other_reader, content_fields
) -> None:
    created = _create(service, doctor, content_fields, status="published")

    with pytest.raises(AuthorizationError):
        service.update_content(other_reader, created.id, {"title": "Not my article"})


def test_update_of_hidden_content_is_not_found(
    service, reader, other_reader, content_fields
) -> None:
    draft = _create(service, reader, content_fields)

    with pytest.raises(NotFoundError):
        service.update_content(other_reader, draft.id, {"title": "Not my article"})


def test_update_rejects_moderation_fields_from_author(service, reader, content_fields) -> None:
    created = _create(service, reader, content_fields, status="published")

    with pytest.raises(AuthorizationError):
        service.update_content(reader, created.id, {"is_approved": True})


def test_update_rejects_unknown_fields(service, doctor, content_fields) -> None:
    created = _create(service, doctor, content_fields)

    with pytest.raises(ValidationError):
        service.update_content(doctor, created.id, {"author_id": "someone-else"})


def test_delete_removes_item_and_media(
    service, db_session: Session, doctor, media_store, content_fields
) -> None:
    image = "/uploads/images/pollen.jpg"
    created = _create(service, doctor, content_fields, featured_image=image)

    service.delete_content(doctor, created.id)

    assert db_session.get(Content, created.id) is None
    assert media_store.discarded == [image]


def test_delete_survives_media_failure(
    service, db_session: Session, doctor, media_store, content_fields
) -> None:
    media_store.fail = True
    created = _create(service, doctor, content_fields, featured_image="/img/a.png")

    service.delete_content(doctor, created.id)

    assert media_store.discarded == ["/img/a.png"]
    assert db_session.get(Content, created.id) is None


def test_delete_by_stranger_is_forbidden(service, doctor, reader, content_fields) -> None:
    created = _create(service, doctor, content_fields, status="published")

    with pytest.raises(AuthorizationError):
        service.delete_content(reader, created.id)


def test_admin_deletes_any_item(service, reader, admin, content_fields) -> None:
    created = _create(service, reader, content_fields)

    service.delete_content(admin, created.id)

    with pytest.raises(NotFoundError):
        service.get_content(admin, created.id)


def test_reject_scenario(service, reader, admin, content_fields) -> None:
    created = _create(service, reader, content_fields, status="published")

    rejected = service.reject(admin, created.id, "needs sources")

    assert rejected.status == "draft"
    assert rejected.rejection_reason == "needs sources"
    assert rejected.rejected_by == admin.id
    assert rejected.approved_by is None
    assert rejected.approved_at is None


def test_approve_clears_rejection(service, reader, admin, content_fields) -> None:
    created = _create(service, reader, content_fields, status="published")
    service.reject(admin, created.id, "needs sources")

    approved = service.approve(admin, created.id)

    assert approved.is_approved is True
    assert approved.approved_by == admin.id
    assert approved.rejection_reason is None
    assert approved.rejected_by is None


def test_moderation_checks_role_before_lookup(service, doctor) -> None:
    with pytest.raises(AuthorizationError):
        service.approve(doctor, MISSING_ID)
    with pytest.raises(AuthorizationError):
        service.reject(doctor, MISSING_ID, "needs sources")


def test_reject_validates_reason(service, admin, reader, content_fields) -> None:
    created = _create(service, reader, content_fields, status="published")

    with pytest.raises(ValidationError):
        service.reject(admin, created.id, "   ")


def test_store_failure_becomes_internal_error(
    service, db_session: Session, doctor, media_store, content_fields
) -> None:
    failure = OperationalError("INSERT", {}, Exception("database is locked"))

    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(InternalError) as excinfo:
            _create(service, doctor, content_fields, featured_image="/uploads/images/new.png")

    assert excinfo.value.message == "Internal server error"
    assert "locked" not in excinfo.value.message
    assert media_store.discarded == ["/uploads/images/new.png"]


def test_failed_update_discards_only_new_image(
    service, db_session: Session, doctor, media_store, content_fields
) -> None:
    created = _create(service, doctor, content_fields, featured_image="/uploads/images/old.png")
    failure = OperationalError("UPDATE", {}, Exception("disk I/O error"))

    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(InternalError):
            service.update_content(
                doctor, created.id, {"featured_image": "/uploads/images/new.png"}
            )

    assert media_store.discarded == ["/uploads/images/new.png"]


def test_own_content_lists_every_status(
    service, reader, other_reader, admin, content_fields
) -> None:
    draft = _create(service, reader, content_fields)
    pending = _create(service, reader, content_fields, status="published")
    _create(service, other_reader, content_fields, status="published")

    page = service.list_own_content(reader)
    assert {item.id for item in page.items} == {draft.id, pending.id}
    assert page.pagination.total == 2

    drafts = service.list_own_content(reader, status="draft")
    assert [item.id for item in drafts.items] == [draft.id]


def test_own_content_requires_identity(service, anonymous) -> None:
    with pytest.raises(AuthenticationRequired):
        service.list_own_content(anonymous)


def test_pending_queue(service, reader, doctor, admin, content_fields) -> None:
    pending = _create(service, reader, content_fields, status="published")
    _create(service, reader, content_fields)
    _create(service, doctor, content_fields, status="published")

    page = service.list_pending(admin)

    assert [item.id for item in page.items] == [pending.id]
    with pytest.raises(AuthorizationError):
        service.list_pending(doctor)


def test_author_stats(service, doctor, reader, other_reader, content_fields) -> None:
    first = _create(service, doctor, content_fields, status="published")
    _create(service, doctor, content_fields)
    service.get_content(reader, first.id)
    service.toggle_like(reader, first.id)
    service.toggle_like(other_reader, first.id)
    service.add_comment(reader, first.id, "Very helpful, thanks!")

    stats = service.author_stats(doctor)

    assert stats.model_dump() == {
        "total": 2,
        "published": 1,
        "drafts": 1,
        "total_views": 1,
        "total_likes": 2,
        "total_comments": 1,
    }


def test_author_stats_empty(service, reader) -> None:
    assert service.author_stats(reader).total == 0
    assert service.author_stats(reader).total_likes == 0


def test_related_content(service, doctor, reader, content_fields) -> None:
    base = _create(service, doctor, content_fields, status="published")
    sibling = _create(service, doctor, content_fields, status="published")
    _create(service, doctor, content_fields, status="published", category="nutrition")
    _create(service, reader, content_fields, status="published")

    related = service.list_related(reader, base.id)

    assert [item.id for item in related] == [sibling.id]


def test_related_content_hides_hidden_base(service, reader, other_reader, content_fields) -> None:
    draft = _create(service, reader, content_fields)

    with pytest.raises(NotFoundError):
        service.list_related(other_reader, draft.id)
