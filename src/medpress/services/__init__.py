"""Business logic services for the MedPress application."""

from .content_service import ContentService
from .engagement import EngagementLedger
from .media import LocalMediaStore, MediaStore
from .query_builder import ListingFilters, Pagination

__all__ = [
    "ContentService",
    "EngagementLedger",
    "ListingFilters",
    "LocalMediaStore",
    "MediaStore",
    "Pagination",
]
