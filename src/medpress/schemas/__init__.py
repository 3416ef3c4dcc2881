# src/medpress/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse
from .content import (
    AuthorInfo,
    AuthorStats,
    CommentCreate,
    CommentResponse,
    ContentCreate,
    ContentPage,
    ContentResponse,
    ContentSummary,
    ContentUpdate,
    LikeResponse,
    PageInfo,
    RejectRequest,
)

__all__ = [
    "AuthorInfo", "AuthorStats",
    "CommentCreate", "CommentResponse",
    "ContentCreate", "ContentPage", "ContentResponse", "ContentSummary", "ContentUpdate",
    "ErrorResponse",
    "LikeResponse",
    "PageInfo",
    "RejectRequest",
]
