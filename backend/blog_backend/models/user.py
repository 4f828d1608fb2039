"""
Blog Backend — User SQLAlchemy Model
======================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for registration, login and role lookups, and by
       Alembic for schema management.

Column notes:
    - id: UUID generated in Python, portable across PostgreSQL and SQLite
    - username: unique, 4-20 chars of [a-zA-Z0-9_] (pattern enforced by the
      request schema, uniqueness by constraint)
    - password: bcrypt hash, never serialized
    - role: integer value of auth.roles.Role, default Normal
    - is_active: disabled accounts cannot log in or pass permission checks
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from blog_backend.auth.roles import DEFAULT_ROLE
from blog_backend.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="Username (letters/digits/underscore, 4-20 chars)",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt password hash",
    )

    role: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(DEFAULT_ROLE),
        server_default=text(str(int(DEFAULT_ROLE))),
        comment="0-Guest 1-Normal 2-VIP 3-Admin 4-SuperAdmin",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="Account enabled flag",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"
