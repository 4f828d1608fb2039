"""
Blog Backend — Blog Request/Response Schemas
==============================================

What:  Create/update payloads and the blog views returned by /blog routes.
How:   The author id is never accepted from the client: `authorId` is an
       undeclared field and answers 400. BlogService takes the author from
       the authenticated caller.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from blog_backend.schemas.common import CamelModel, RequestModel


class BlogCreate(RequestModel):
    title: str = Field(min_length=1, max_length=255, examples=["Building a blog with FastAPI"])
    content: str = Field(min_length=1)
    cover_url: Optional[str] = Field(default=None, max_length=512)
    status: Optional[int] = Field(
        default=None,
        ge=0,
        le=2,
        description="0-Draft 1-Published 2-Unpublished (default 0)",
    )


class BlogUpdate(RequestModel):
    """Partial update: only fields present in the request body change."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    cover_url: Optional[str] = Field(default=None, max_length=512)
    status: Optional[int] = Field(default=None, ge=0, le=2)


class BlogResponse(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID
    cover_url: Optional[str] = None
    status: int
    created_at: datetime
    updated_at: datetime


class BlogListResponse(CamelModel):
    list: List[BlogResponse]
    total: int
    page: int
    size: int
    total_pages: int


class BlogDeleted(CamelModel):
    id: uuid.UUID


class BlogStatusResult(CamelModel):
    id: uuid.UUID
    status: int
