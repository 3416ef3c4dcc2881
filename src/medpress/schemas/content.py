# src/medpress/schemas/content.py
"""Content-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from medpress.domain.content import CREATE_STATUSES, Category, ContentStatus

TITLE_MIN, TITLE_MAX = 5, 200
BODY_MIN = 10
SUMMARY_MIN, SUMMARY_MAX = 10, 500
TAG_MIN, TAG_MAX = 1, 30


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


Trimmed = Annotated[str, BeforeValidator(_strip)]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = [tag.strip() for tag in tags]
    for tag in cleaned:
        if not TAG_MIN <= len(tag) <= TAG_MAX:
            raise ValueError(f"Each tag must be {TAG_MIN}-{TAG_MAX} characters")
    return cleaned


def _check_image_ref(ref: str | None) -> str | None:
    if ref is None:
        return None
    ref = ref.strip()
    if not ref:
        return None
    if not ref.startswith(("http://", "https://", "/")):
        raise ValueError("Featured image must be a URL or an absolute path")
    return ref


class ContentCreate(BaseModel):
    """Schema for creating a new article."""

    title: Trimmed = Field(..., min_length=TITLE_MIN, max_length=TITLE_MAX)
    body: Trimmed = Field(..., min_length=BODY_MIN)
    summary: Trimmed = Field(..., min_length=SUMMARY_MIN, max_length=SUMMARY_MAX)
    category: Category
    tags: list[str] = Field(default_factory=list)
    featured_image: str | None = Field(None, description="URL or path of the featured image")
    status: ContentStatus = ContentStatus.DRAFT

    model_config = ConfigDict(extra="forbid")

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, tags: list[str]) -> list[str]:
        return _clean_tags(tags) or []

    @field_validator("featured_image")
    @classmethod
    def _validate_image(cls, ref: str | None) -> str | None:
        return _check_image_ref(ref)

    @field_validator("status")
    @classmethod
    def _validate_status(cls, status: ContentStatus) -> ContentStatus:
        if status not in CREATE_STATUSES:
            raise ValueError("New content must be a draft or published")
        return status


class ContentUpdate(BaseModel):
    """Schema for partial updates; only supplied fields are applied.

    ``is_approved`` is a moderation field and may only be sent by admins.
    """

    title: Trimmed | None = Field(None, min_length=TITLE_MIN, max_length=TITLE_MAX)
    body: Trimmed | None = Field(None, min_length=BODY_MIN)
    summary: Trimmed | None = Field(None, min_length=SUMMARY_MIN, max_length=SUMMARY_MAX)
    category: Category | None = None
    tags: list[str] | None = None
    featured_image: str | None = None
    status: ContentStatus | None = None
    is_approved: bool | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, tags: list[str] | None) -> list[str] | None:
        return _clean_tags(tags)

    @field_validator("featured_image")
    @classmethod
    def _validate_image(cls, ref: str | None) -> str | None:
        return _check_image_ref(ref)


class CommentCreate(BaseModel):
    """Schema for adding a comment."""

    content: Trimmed = Field(..., min_length=1, max_length=1000)


class RejectRequest(BaseModel):
    """Schema for rejecting an article."""

    reason: Trimmed = Field(..., min_length=1, max_length=500)


class AuthorInfo(BaseModel):
    """Display data for an author or commenter."""

    id: str
    name: str | None = None
    role: str | None = None
    specialty: str | None = None
    profile_image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    """Schema for a comment returned by the API."""

    id: str
    user: AuthorInfo
    content: str
    created_at: datetime


class ContentSummary(BaseModel):
    """Listing entry; omits the body and comment list."""

    id: str
    title: str
    summary: str
    category: str
    tags: list[str]
    author: AuthorInfo
    featured_image: str | None
    status: str
    is_approved: bool
    views: int
    like_count: int
    comment_count: int
    created_at: datetime
    updated_at: datetime


class ContentResponse(ContentSummary):
    """Full article including moderation details and comments."""

    body: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    is_liked: bool = False
    comments: list[CommentResponse] = Field(default_factory=list)


class LikeResponse(BaseModel):
    """Outcome of a like toggle."""

    like_count: int
    is_liked: bool


class PageInfo(BaseModel):
    """Offset pagination metadata."""

    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool


class ContentPage(BaseModel):
    """A page of listing entries."""

    items: list[ContentSummary]
    pagination: PageInfo


class AuthorStats(BaseModel):
    """Totals over an author's own articles."""

    total: int = 0
    published: int = 0
    drafts: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0
