"""Core configuration and error types."""

from .errors import (
    AuthenticationRequired,
    AuthorizationError,
    ContentError,
    FieldError,
    InternalError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from .settings import Settings, settings

__all__ = [
    "AuthenticationRequired",
    "AuthorizationError",
    "ContentError",
    "FieldError",
    "InternalError",
    "NotFoundError",
    "PreconditionFailedError",
    "Settings",
    "ValidationError",
    "settings",
]
