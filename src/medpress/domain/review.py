"""Moderation review state as a tagged variant.

An item is either unreviewed, approved by someone at some time, or rejected by
someone at some time with a reason. Approval and rejection details can never
coexist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ReviewState(StrEnum):
    """Discriminator stored alongside the review columns."""

    UNREVIEWED = "unreviewed"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Unreviewed:
    state = ReviewState.UNREVIEWED


@dataclass(frozen=True)
class Approved:
    by: str
    at: datetime

    state = ReviewState.APPROVED


@dataclass(frozen=True)
class Rejected:
    by: str
    at: datetime
    reason: str

    state = ReviewState.REJECTED

    def __post_init__(self) -> None:
        if not self.reason or not self.reason.strip():
            raise ValueError("Rejection requires a reason")


Review = Unreviewed | Approved | Rejected

UNREVIEWED = Unreviewed()
