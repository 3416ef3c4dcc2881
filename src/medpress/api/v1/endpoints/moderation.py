"""Moderation endpoints for the MedPress API (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from medpress.api.v1.dependencies import ActorDep, ContentServiceDep
from medpress.schemas.common import ErrorResponse
from medpress.schemas.content import ContentPage, ContentResponse, RejectRequest

router = APIRouter(
    prefix="/moderation",
    tags=["moderation"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


@router.get("/pending", response_model=ContentPage)
def list_pending(
    actor: ActorDep,
    service: ContentServiceDep,
    page: int = Query(1),
    limit: int | None = Query(None),
) -> ContentPage:
    """Published articles waiting for approval."""
    return service.list_pending(actor, page=page, limit=limit)


@router.post("/{content_id}/approve", response_model=ContentResponse)
def approve_content(
    content_id: str,
    actor: ActorDep,
    service: ContentServiceDep,
) -> ContentResponse:
    """Approve an article."""
    return service.approve(actor, content_id)


@router.post("/{content_id}/reject", response_model=ContentResponse)
def reject_content(
    content_id: str,
    payload: RejectRequest,
    actor: ActorDep,
    service: ContentServiceDep,
) -> ContentResponse:
    """Reject an article and send it back to draft."""
    return service.reject(actor, content_id, payload.reason)
