"""Shared API dependencies for actor resolution and service wiring."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from medpress.db.session import get_db
from medpress.domain.actor import Actor
from medpress.services.content_service import ContentService
from medpress.services.media import LocalMediaStore, MediaStore

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_actor(request: Request) -> Actor:
    """Return the actor resolved by the authentication middleware.

    Authentication runs upstream and stores an :class:`Actor` on
    ``request.state.actor``; requests without one are anonymous.
    """
    actor = getattr(request.state, "actor", None)
    if isinstance(actor, Actor):
        return actor
    return Actor.anonymous()


def get_media_store() -> MediaStore:
    """Return the media store used for reference cleanup."""
    return LocalMediaStore()


ActorDep = Annotated[Actor, Depends(get_actor)]
MediaStoreDep = Annotated[MediaStore, Depends(get_media_store)]


def get_content_service(db: SessionDep, media: MediaStoreDep) -> ContentService:
    """Build the content service for the current request."""
    return ContentService(db, media)


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
