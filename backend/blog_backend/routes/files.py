"""
Blog Backend — File Route Handlers
====================================

What:  POST /file/upload, DELETE /file/delete, GET /file/list.
How:   All routes require the Authentication Guard, checked before the
       multipart body is read. Uploads use the field name `file`; stored
       files are publicly readable under /uploads/<name> through the static
       mount in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from blog_backend.auth.guards import AuthenticatedRoute, authenticate
from blog_backend.schemas.common import ApiResponse, ErrorResponse
from blog_backend.schemas.file import FileDeleted, FileListResponse, UploadedFile
from blog_backend.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/file",
    tags=["Files"],
    route_class=AuthenticatedRoute,
    dependencies=[Depends(authenticate)],
    responses={401: {"description": "Not logged in or token invalid", "model": ErrorResponse}},
)


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UploadedFile],
    responses={
        400: {"description": "Missing file, unsupported type or too large", "model": ErrorResponse},
        500: {"description": "File could not be written", "model": ErrorResponse},
    },
    summary="Upload a file",
    description="Accepts image/jpeg, image/png, application/pdf and application/zip.",
)
async def upload_file(
    file: Optional[UploadFile] = File(default=None, description="The file to upload"),
) -> ApiResponse[UploadedFile]:
    try:
        stored = await file_service.store_upload(file)
    finally:
        if file is not None:
            await file.close()
    return ApiResponse(code=201, message="File uploaded", data=stored)


@router.delete(
    "/delete",
    response_model=ApiResponse[FileDeleted],
    responses={
        400: {"description": "Invalid file name", "model": ErrorResponse},
        404: {"description": "File does not exist", "model": ErrorResponse},
    },
    summary="Delete an uploaded file",
)
async def delete_file(
    file_name: Optional[str] = Query(default=None, alias="fileName"),
) -> ApiResponse[FileDeleted]:
    deleted = await file_service.delete_file(file_name)
    return ApiResponse(code=200, message="File deleted", data=deleted)


@router.get(
    "/list",
    response_model=ApiResponse[FileListResponse],
    responses={400: {"description": "Invalid paging", "model": ErrorResponse}},
    summary="List uploaded files",
)
async def list_files(
    page: int = Query(default=1),
    size: int = Query(default=10, description="Items per page, at most 100"),
) -> ApiResponse[FileListResponse]:
    result = await file_service.list_files(page=page, size=size)
    return ApiResponse(code=200, message="File list retrieved", data=result)
