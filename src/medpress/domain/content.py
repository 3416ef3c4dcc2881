"""Enumerations describing a content item."""

from enum import StrEnum


class ContentStatus(StrEnum):
    """Publication status of a content item."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Category(StrEnum):
    """Medical topics an article can be filed under."""

    HEALTH_TIPS = "health-tips"
    MEDICAL_ADVICE = "medical-advice"
    NUTRITION = "nutrition"
    FITNESS = "fitness"
    MENTAL_HEALTH = "mental-health"
    DISEASES = "diseases"
    TREATMENTS = "treatments"
    LIFESTYLE = "lifestyle"
    RESEARCH = "research"
    GENERAL = "general"


CATEGORIES: tuple[str, ...] = tuple(category.value for category in Category)

# Statuses an author may request when creating an item.
CREATE_STATUSES = frozenset({ContentStatus.DRAFT, ContentStatus.PUBLISHED})
