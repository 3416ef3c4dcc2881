# src/medpress/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import content_router, moderation_router

__all__ = [
    "content_router",
    "moderation_router",
]
