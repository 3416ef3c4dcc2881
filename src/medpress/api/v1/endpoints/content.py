"""Content and engagement endpoints for the MedPress API."""

from fastapi import APIRouter, Query, status

from medpress.api.v1.dependencies import ActorDep, ContentServiceDep
from medpress.schemas.common import ErrorResponse
from medpress.schemas.content import (
    AuthorStats,
    CommentCreate,
    CommentResponse,
    ContentCreate,
    ContentPage,
    ContentResponse,
    ContentSummary,
    ContentUpdate,
    LikeResponse,
)
from medpress.services.query_builder import ORDER_NEWEST, ListingFilters

router = APIRouter(
    prefix="/content",
    tags=["content"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@router.get("/", response_model=ContentPage)
def list_content(
    actor: ActorDep,
    service: ContentServiceDep,
    page: int = Query(1, description="1-based page number"),
    limit: int | None = Query(None, description="Page size, clamped to 1-50"),
    category: str | None = Query(None, description="Filter by category"),
    search: str | None = Query(None, description="Free-text search over title, body and tags"),
    author: str | None = Query(None, description="Filter by author id"),
    status_filter: str | None = Query(None, alias="status", description="Admin only"),
    order: str = Query(ORDER_NEWEST, description="newest or featured"),
) -> ContentPage:
    """List published, approved articles (admins may choose a status)."""
    filters = ListingFilters(
        category=category,
        search=search,
        author=author,
        status=status_filter,
        order=order,
    )
    return service.list_content(actor, filters, page=page, limit=limit)


@router.get("/featured", response_model=list[ContentSummary])
def list_featured(
    actor: ActorDep,
    service: ContentServiceDep,
    limit: int | None = Query(None),
) -> list[ContentSummary]:
    """Most viewed public articles."""
    return service.list_featured(actor, limit=limit)


@router.get("/mine", response_model=ContentPage)
def list_my_content(
    actor: ActorDep,
    service: ContentServiceDep,
    page: int = Query(1),
    limit: int | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
) -> ContentPage:
    """The caller's own articles in any status."""
    return service.list_own_content(actor, status=status_filter, page=page, limit=limit)


@router.get("/stats", response_model=AuthorStats)
def get_author_stats(actor: ActorDep, service: ContentServiceDep) -> AuthorStats:
    """Totals over the caller's own articles."""
    return service.author_stats(actor)


@router.get("/{content_id}", response_model=ContentResponse)
def get_content(content_id: str, actor: ActorDep, service: ContentServiceDep) -> ContentResponse:
    """Fetch one article and count the view."""
    return service.get_content(actor, content_id)


@router.get("/{content_id}/related", response_model=list[ContentSummary])
def list_related(
    content_id: str,
    actor: ActorDep,
    service: ContentServiceDep,
    limit: int | None = Query(None),
) -> list[ContentSummary]:
    """Public articles in the same category."""
    return service.list_related(actor, content_id, limit=limit)


@router.post("/", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
def create_content(
    payload: ContentCreate,
    actor: ActorDep,
    service: ContentServiceDep,
) -> ContentResponse:
    """Create an article authored by the caller."""
    return service.create_content(actor, payload)


@router.put("/{content_id}", response_model=ContentResponse)
def update_content(
    content_id: str,
    payload: ContentUpdate,
    actor: ActorDep,
    service: ContentServiceDep,
) -> ContentResponse:
    """Edit an article as its author or an admin."""
    return service.update_content(actor, content_id, payload)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(content_id: str, actor: ActorDep, service: ContentServiceDep) -> None:
    """Delete an article as its author or an admin."""
    service.delete_content(actor, content_id)


@router.post("/{content_id}/like", response_model=LikeResponse)
def toggle_like(content_id: str, actor: ActorDep, service: ContentServiceDep) -> LikeResponse:
    """Like the article, or remove an existing like."""
    return service.toggle_like(actor, content_id)


@router.post(
    "/{content_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    content_id: str,
    payload: CommentCreate,
    actor: ActorDep,
    service: ContentServiceDep,
) -> CommentResponse:
    """Comment on a public article."""
    return service.add_comment(actor, content_id, payload.content)


@router.delete("/{content_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    content_id: str,
    comment_id: str,
    actor: ActorDep,
    service: ContentServiceDep,
) -> None:
    """Remove a comment as its writer, the article's author, or an admin."""
    service.delete_comment(actor, content_id, comment_id)
