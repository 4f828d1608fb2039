"""
Blog Backend — Blog Service
=============================

What:  Paginated listing, lookup, creation, partial update, deletion and
       status changes for blog posts.
How:   Stateless service over the request's AsyncSession. Route guards
       handle role requirements (VIP to create, Admin to delete or change
       status); the author-or-admin rule for updates lives here because it
       needs the blog row.
Who:   Called by routes/blogs.py.

Listing query (GET /blog):
    SELECT ... FROM blogs
    WHERE title ILIKE '%<keyword>%' ESCAPE '\\'  -- only when keyword given
      AND status = :status                      -- only when status given
    ORDER BY created_at DESC
    LIMIT :size OFFSET (:page - 1) * :size
"""

import logging
import math
import uuid
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_backend.auth.roles import Role
from blog_backend.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from blog_backend.models.blog import Blog, BlogStatus
from blog_backend.schemas.blog import (
    BlogCreate,
    BlogListResponse,
    BlogResponse,
    BlogUpdate,
)
from blog_backend.services.paging import validate_page
from blog_backend.services.user_service import parse_id, user_service

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in BlogStatus}

# Callers at or above this role may update any blog, not only their own
UPDATE_ANY_ROLE = Role.ADMIN


def validate_status(status: int) -> BlogStatus:
    if status not in VALID_STATUSES:
        raise ValidationError(
            "Invalid status, supported values: 0-Draft 1-Published 2-Unpublished",
            field="status",
            context={"status": status},
        )
    return BlogStatus(status)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so `%` and `_` in a keyword match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BlogService:
    """Business logic layer for blog posts."""

    async def list_blogs(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        keyword: Optional[str] = None,
        status: Optional[int] = None,
    ) -> BlogListResponse:
        """
        Page through blogs, newest first.

        Args:
            page:    1-based page number
            size:    items per page
            keyword: case-insensitive title substring, wildcards literal
                     (blank = no filter)
            status:  0, 1 or 2 (None = no filter)

        Raises:
            ValidationError: page/size out of bounds, or status outside {0, 1, 2}
        """
        validate_page(page, size)

        filters = []
        if keyword and keyword.strip():
            pattern = f"%{escape_like(keyword.strip())}%"
            filters.append(Blog.title.ilike(pattern, escape="\\"))
        if status is not None:
            filters.append(Blog.status == int(validate_status(status)))

        try:
            total = (
                await db.execute(select(func.count(Blog.id)).where(*filters))
            ).scalar() or 0

            result = await db.execute(
                select(Blog)
                .where(*filters)
                .order_by(Blog.created_at.desc())
                .offset((page - 1) * size)
                .limit(size)
            )
            blogs = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing blogs: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_blogs"})

        return BlogListResponse(
            list=[BlogResponse.model_validate(b) for b in blogs],
            total=total,
            page=page,
            size=size,
            total_pages=math.ceil(total / size),
        )

    async def get_blog(self, db: AsyncSession, blog_id: str) -> BlogResponse:
        """Raises NotFoundError when no blog has this id."""
        blog = await self._get_or_404(db, blog_id)
        return BlogResponse.model_validate(blog)

    async def create_blog(
        self,
        db: AsyncSession,
        data: BlogCreate,
        author_id: str,
    ) -> BlogResponse:
        """
        Create a blog authored by the caller.

        The author is always the authenticated subject; status defaults to Draft.
        """
        author_uuid = parse_id(author_id)
        if author_uuid is None:
            raise UnauthorizedError("Not logged in or token expired, please log in again")

        status = BlogStatus.DRAFT if data.status is None else validate_status(data.status)
        blog = Blog(
            title=data.title,
            content=data.content,
            cover_url=data.cover_url,
            status=int(status),
            author_id=author_uuid,
        )
        try:
            db.add(blog)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating blog: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_blog"})

        logger.info("Blog created: %s by %s", blog.id, author_id)
        return BlogResponse.model_validate(blog)

    async def update_blog(
        self,
        db: AsyncSession,
        blog_id: str,
        data: BlogUpdate,
        caller_id: str,
    ) -> BlogResponse:
        """
        Apply a partial update.

        Only the author or a caller with role >= Admin may update. The
        caller's role is read from the store, not from the token.

        Raises:
            NotFoundError:     blog missing
            UnauthorizedError: caller no longer resolves to an active user
            ForbiddenError:    caller is neither author nor Admin+
        """
        blog = await self._get_or_404(db, blog_id)

        caller_role = await user_service.get_active_role(db, caller_id)
        if caller_role is None:
            raise UnauthorizedError("Not logged in or token expired, please log in again")

        is_author = str(blog.author_id) == str(parse_id(caller_id))
        if not is_author and not caller_role.satisfies(UPDATE_ANY_ROLE):
            logger.info("Update of blog %s refused for %s (%s)", blog.id, caller_id, caller_role.name)
            raise ForbiddenError(
                "Only the author or an administrator can update this blog",
                context={"blog_id": str(blog.id), "caller_id": caller_id},
            )

        changes = data.model_dump(exclude_unset=True)
        if changes.get("status") is not None:
            changes["status"] = int(validate_status(changes["status"]))
        for field, value in changes.items():
            # title/content are NOT NULL; an explicit null leaves them unchanged
            if value is None and field in ("title", "content", "status"):
                continue
            setattr(blog, field, value)

        try:
            await db.flush()
            await db.refresh(blog)
        except SQLAlchemyError as e:
            logger.error("Database error updating blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "update_blog"})

        logger.info("Blog updated: %s fields=%s", blog.id, sorted(changes))
        return BlogResponse.model_validate(blog)

    async def delete_blog(self, db: AsyncSession, blog_id: str) -> uuid.UUID:
        """Delete a blog and return its id. Raises NotFoundError when absent."""
        blog = await self._get_or_404(db, blog_id)
        try:
            await db.delete(blog)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting blog %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete_blog"})

        logger.info("Blog deleted: %s", blog.id)
        return blog.id

    async def change_status(
        self,
        db: AsyncSession,
        blog_id: str,
        status: int,
    ) -> Tuple[BlogResponse, bool]:
        """
        Move a blog to another status.

        Returns:
            (blog, changed). `changed` is False when the blog already had the
            target status; nothing is written in that case.
        """
        target = validate_status(status)
        blog = await self._get_or_404(db, blog_id)

        if blog.status == int(target):
            return BlogResponse.model_validate(blog), False

        blog.status = int(target)
        try:
            await db.flush()
            await db.refresh(blog)
        except SQLAlchemyError as e:
            logger.error("Database error changing status of %s: %s", blog_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "change_status"})

        logger.info("Blog %s status -> %s", blog.id, target.label)
        return BlogResponse.model_validate(blog), True

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_or_404(self, db: AsyncSession, blog_id: str) -> Blog:
        blog_uuid = parse_id(blog_id)
        blog = None
        if blog_uuid is not None:
            try:
                result = await db.execute(select(Blog).where(Blog.id == blog_uuid))
                blog = result.scalar_one_or_none()
            except SQLAlchemyError as e:
                logger.error("Database error fetching blog %s: %s", blog_id, str(e))
                raise DatabaseError(context={"operation": "get_blog"})

        if blog is None:
            raise NotFoundError(resource="blog", resource_id=str(blog_id), message="Blog does not exist")
        return blog


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
