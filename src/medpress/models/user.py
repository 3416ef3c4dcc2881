# src/medpress/models/user.py
"""SQLAlchemy model for the author directory."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from medpress.db.session import Base
from medpress.domain.actor import Role


class User(Base):
    """Display data for people who author articles and comments.

    Identity and role of the caller come from the authentication layer; this
    table only supplies names and avatars for responses.
    """

    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=Role.READER.value)
    specialty: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
