# src/medpress/models/__init__.py
"""SQLAlchemy models for the MedPress application."""

from .content import Content, ContentTag
from .engagement import Comment, ContentLike
from .user import User

__all__ = [
    "Comment",
    "Content",
    "ContentLike",
    "ContentTag",
    "User",
]
