"""Convert ORM rows into API schemas."""
from __future__ import annotations

from medpress.models import Comment, Content, User
from medpress.schemas.content import (
    AuthorInfo,
    CommentResponse,
    ContentResponse,
    ContentSummary,
)


def to_author_info(user: User | None, user_id: str) -> AuthorInfo:
    """Return display data, falling back to the bare id for unknown users."""
    if user is None:
        return AuthorInfo(id=user_id)
    return AuthorInfo.model_validate(user)


def to_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user=to_author_info(comment.user, comment.user_id),
        content=comment.body,
        created_at=comment.created_at,
    )


def _summary_fields(content: Content, like_count: int, comment_count: int) -> dict:
    return {
        "id": content.id,
        "title": content.title,
        "summary": content.summary,
        "category": content.category,
        "tags": list(content.tags or []),
        "author": to_author_info(content.author, content.author_id),
        "featured_image": content.featured_image,
        "status": content.status,
        "is_approved": content.is_approved,
        "views": content.views,
        "like_count": like_count,
        "comment_count": comment_count,
        "created_at": content.created_at,
        "updated_at": content.updated_at,
    }


def to_content_summary(content: Content, like_count: int, comment_count: int) -> ContentSummary:
    return ContentSummary(**_summary_fields(content, like_count, comment_count))


def to_content_response(
    content: Content,
    *,
    like_count: int,
    is_liked: bool,
    comments: list[Comment],
) -> ContentResponse:
    """Convert a content row into the full detail schema."""
    return ContentResponse(
        **_summary_fields(content, like_count, len(comments)),
        body=content.body,
        approved_by=content.approved_by,
        approved_at=content.approved_at,
        rejection_reason=content.rejection_reason,
        rejected_by=content.rejected_by,
        rejected_at=content.rejected_at,
        is_liked=is_liked,
        comments=[to_comment_response(comment) for comment in comments],
    )
