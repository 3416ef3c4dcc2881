"""Resolved caller identity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Roles known to the content service."""

    ANONYMOUS = "anonymous"
    READER = "reader"
    DOCTOR = "doctor"
    ADMIN = "admin"


# Roles whose content is approved without moderation.
PRIVILEGED_ROLES = frozenset({Role.DOCTOR, Role.ADMIN})


@dataclass(frozen=True)
class Actor:
    """Identity and role of the caller issuing a request.

    Anonymous actors carry no id. The actor is produced by the authentication
    layer; this service only consumes it.
    """

    id: str | None
    role: Role = Role.READER

    def __post_init__(self) -> None:
        if self.role is Role.ANONYMOUS and self.id is not None:
            raise ValueError("Anonymous actors cannot carry an id")
        if self.role is not Role.ANONYMOUS and not self.id:
            raise ValueError(f"Actor with role {self.role.value!r} requires an id")

    @classmethod
    def anonymous(cls) -> Actor:
        return cls(id=None, role=Role.ANONYMOUS)

    @property
    def is_authenticated(self) -> bool:
        return self.role is not Role.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def owns(self, author_id: str | None) -> bool:
        """Return True when this actor is the given author."""
        return self.id is not None and self.id == author_id
