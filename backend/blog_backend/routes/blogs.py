"""
Blog Backend — Blog Route Handlers
====================================

What:  Blog listing, lookup, creation, update, deletion and status changes.
How:   Every route requires the Authentication Guard (AuthenticatedRoute plus
       the router dependency, so the token is checked before the body).
       Role requirements are route dependencies:

           GET    /blog                any authenticated caller
           GET    /blog/{id}           any authenticated caller
           POST   /blog                VIP User and above
           PUT    /blog/{id}           author, or Administrator and above
           DELETE /blog/{id}           Administrator and above
           PUT    /blog/{id}/status    Administrator and above

       The author-or-admin rule of PUT /blog/{id} needs the blog row, so
       BlogService enforces it.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_backend.auth.guards import AuthenticatedRoute, PermissionGuard, authenticate
from blog_backend.auth.roles import Role
from blog_backend.database import get_db_session
from blog_backend.models.blog import BlogStatus
from blog_backend.schemas.blog import (
    BlogCreate,
    BlogDeleted,
    BlogListResponse,
    BlogResponse,
    BlogStatusResult,
    BlogUpdate,
)
from blog_backend.schemas.common import ApiResponse, ErrorResponse
from blog_backend.services.blog_service import blog_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/blog",
    tags=["Blogs"],
    route_class=AuthenticatedRoute,
    dependencies=[Depends(authenticate)],
    responses={401: {"description": "Not logged in or token invalid", "model": ErrorResponse}},
)

require_vip = PermissionGuard(Role.VIP)
require_admin = PermissionGuard(Role.ADMIN)


@router.get(
    "",
    response_model=ApiResponse[BlogListResponse],
    responses={400: {"description": "Invalid paging or status", "model": ErrorResponse}},
    summary="List blogs with pagination",
)
async def list_blogs(
    page: int = Query(default=1, description="1-based page number"),
    size: int = Query(default=10, description="Items per page, at most 100"),
    keyword: Optional[str] = Query(default=None, description="Case-insensitive title search"),
    status: Optional[int] = Query(default=None, description="0-Draft 1-Published 2-Unpublished"),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogListResponse]:
    result = await blog_service.list_blogs(db, page=page, size=size, keyword=keyword, status=status)
    return ApiResponse(code=200, message="Blog list retrieved", data=result)


@router.get(
    "/{blog_id}",
    response_model=ApiResponse[BlogResponse],
    responses={404: {"description": "Blog does not exist", "model": ErrorResponse}},
    summary="Get a single blog",
)
async def get_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogResponse]:
    blog = await blog_service.get_blog(db, blog_id)
    return ApiResponse(code=200, message="Blog retrieved", data=blog)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[BlogResponse],
    dependencies=[Depends(require_vip)],
    responses={403: {"description": "Requires VIP User or above", "model": ErrorResponse}},
    summary="Create a blog",
)
async def create_blog(
    body: BlogCreate,
    subject_id: str = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogResponse]:
    blog = await blog_service.create_blog(db, body, author_id=subject_id)
    return ApiResponse(code=201, message="Blog created", data=blog)


@router.put(
    "/{blog_id}",
    response_model=ApiResponse[BlogResponse],
    responses={
        403: {"description": "Not the author and not an administrator", "model": ErrorResponse},
        404: {"description": "Blog does not exist", "model": ErrorResponse},
    },
    summary="Update a blog (partial)",
)
async def update_blog(
    blog_id: str,
    body: BlogUpdate,
    subject_id: str = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogResponse]:
    blog = await blog_service.update_blog(db, blog_id, body, caller_id=subject_id)
    return ApiResponse(code=200, message="Blog updated", data=blog)


@router.delete(
    "/{blog_id}",
    response_model=ApiResponse[BlogDeleted],
    dependencies=[Depends(require_admin)],
    responses={
        403: {"description": "Requires Administrator or above", "model": ErrorResponse},
        404: {"description": "Blog does not exist", "model": ErrorResponse},
    },
    summary="Delete a blog",
)
async def delete_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogDeleted]:
    deleted_id = await blog_service.delete_blog(db, blog_id)
    return ApiResponse(code=200, message="Blog deleted", data=BlogDeleted(id=deleted_id))


@router.put(
    "/{blog_id}/status",
    response_model=ApiResponse[BlogStatusResult],
    dependencies=[Depends(require_admin)],
    responses={
        400: {"description": "Invalid status", "model": ErrorResponse},
        403: {"description": "Requires Administrator or above", "model": ErrorResponse},
        404: {"description": "Blog does not exist", "model": ErrorResponse},
    },
    summary="Change the status of a blog",
)
async def change_status(
    blog_id: str,
    status: int = Query(description="0-Draft 1-Published 2-Unpublished"),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[BlogStatusResult]:
    blog, changed = await blog_service.change_status(db, blog_id, status)
    label = BlogStatus(blog.status).label
    message = f"Blog status changed to {label}" if changed else f"Blog is already {label}"
    return ApiResponse(
        code=200,
        message=message,
        data=BlogStatusResult(id=blog.id, status=blog.status),
    )
