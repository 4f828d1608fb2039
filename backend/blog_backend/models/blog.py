"""
Blog Backend — Blog SQLAlchemy Model
======================================

What:  ORM model representing the `blogs` table.
Who:   Used by BlogService for CRUD and status changes.

    - author_id references users.id by value only; deleting a user leaves
      their blogs in place
    - status: 0 Draft, 1 Published, 2 Unpublished

Index on created_at DESC serves the list endpoint's default ordering.
"""

import uuid
from datetime import datetime, timezone
from enum import IntEnum
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from blog_backend.database import Base


class BlogStatus(IntEnum):
    DRAFT = 0
    PUBLISHED = 1
    UNPUBLISHED = 2

    @property
    def label(self) -> str:
        return self.name.lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Blog(Base):
    """A blog post."""

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="Author user id (set from the caller's token)",
    )

    cover_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    status: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(BlogStatus.DRAFT),
        server_default=text("0"),
        comment="0-Draft 1-Published 2-Unpublished",
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
        return f"<Blog(id={self.id}, title='{self.title}', status={self.status})>"


Index("idx_blogs_created_at", Blog.created_at.desc())
