"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class FieldErrorOut(BaseModel):
    """A single field-level validation problem."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every failed operation."""

    kind: str = Field(..., description="Machine-readable error category.")
    message: str = Field(..., description="Human-readable description.")
    errors: list[FieldErrorOut] = Field(default_factory=list)
