"""Error taxonomy surfaced by content operations.

Every operation in :mod:`medpress.services` fails with one of the exceptions
below. The web layer maps them onto HTTP responses; callers never see raw
store exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation problem."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ContentError(RuntimeError):
    """Base exception raised for content operation failures.

    Attributes:
        kind: Stable machine-readable category.
        status_code: HTTP status the web layer responds with.
        message: Human-readable description safe to show to callers.
    """

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body describing this error."""
        return {"kind": self.kind, "message": self.message, "errors": []}


class ValidationError(ContentError):
    """Raised when input is malformed or out of range."""

    kind = "validation"
    status_code = 400

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(message, [FieldError(field=field, message=message)])

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["errors"] = [error.as_dict() for error in self.errors]
        return payload


class AuthorizationError(ContentError):
    """Raised when the actor's role or ownership does not permit the operation."""

    kind = "authorization"
    status_code = 403


class AuthenticationRequired(AuthorizationError):
    """Raised when an anonymous actor calls an operation that needs an identity."""

    kind = "authentication_required"
    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class NotFoundError(ContentError):
    """Raised for absent, malformed, or hidden identifiers.

    Hidden content raises exactly the same error as missing content so the
    caller cannot learn that a draft or rejected item exists.
    """

    kind = "not_found"
    status_code = 404


class PreconditionFailedError(ContentError):
    """Raised when an operation is not valid for the item's lifecycle state."""

    kind = "precondition_failed"
    status_code = 409


class InternalError(ContentError):
    """Raised when the store fails unexpectedly; details are only logged."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
