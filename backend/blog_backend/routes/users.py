"""
Blog Backend — User Route Handlers
====================================

What:  POST /user/register, POST /user/login, PUT /user/reset-pwd,
       GET /user/info.
How:   Register and login are public (`router`); reset-pwd and info live on
       `account_router`, which requires the Authentication Guard and acts on
       the token's subject only.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_backend.auth.guards import AuthenticatedRoute, authenticate
from blog_backend.auth.tokens import TokenService, get_token_service
from blog_backend.database import get_db_session
from blog_backend.schemas.common import ApiResponse, ErrorResponse
from blog_backend.schemas.user import (
    LoginRequest,
    LoginResult,
    RegisterRequest,
    ResetPasswordRequest,
    UserInfo,
    UserPublic,
)
from blog_backend.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])

# Routes acting on the caller's own account
account_router = APIRouter(
    prefix="/user",
    tags=["Users"],
    route_class=AuthenticatedRoute,
    dependencies=[Depends(authenticate)],
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserPublic],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        409: {"description": "Username taken", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    user = await user_service.register(db, body)
    return ApiResponse(code=201, message="Registration successful", data=user)


@router.post(
    "/login",
    response_model=ApiResponse[LoginResult],
    responses={
        403: {"description": "Account disabled", "model": ErrorResponse},
        404: {"description": "Incorrect username or password", "model": ErrorResponse},
    },
    summary="Log in and obtain a session token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
) -> ApiResponse[LoginResult]:
    result = await user_service.login(db, body, token_service)
    return ApiResponse(code=200, message="Login successful", data=result)


@account_router.put(
    "/reset-pwd",
    response_model=ApiResponse[None],
    responses={
        400: {"description": "Invalid input or wrong old password", "model": ErrorResponse},
        401: {"description": "Not logged in", "model": ErrorResponse},
    },
    summary="Change the caller's password",
)
async def reset_password(
    body: ResetPasswordRequest,
    subject_id: str = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await user_service.reset_password(db, subject_id, body)
    return ApiResponse(code=200, message="Password reset successful, please log in again", data=None)


@account_router.get(
    "/info",
    response_model=ApiResponse[UserInfo],
    responses={
        401: {"description": "Not logged in", "model": ErrorResponse},
        404: {"description": "User does not exist", "model": ErrorResponse},
    },
    summary="Profile of the caller",
)
async def user_info(
    subject_id: str = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserInfo]:
    info = await user_service.get_info(db, subject_id)
    return ApiResponse(code=200, message="User info retrieved", data=info)
