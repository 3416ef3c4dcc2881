"""Pure domain types shared by the models, services and API layers."""

from .actor import Actor, Role
from .content import CATEGORIES, Category, ContentStatus
from .review import Approved, Rejected, Review, Unreviewed

__all__ = [
    "Actor",
    "Approved",
    "CATEGORIES",
    "Category",
    "ContentStatus",
    "Rejected",
    "Review",
    "Role",
    "Unreviewed",
]
