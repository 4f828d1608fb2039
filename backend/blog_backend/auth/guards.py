"""
Blog Backend — Request Guards
===============================

What:  Pre-handler checks that allow or deny a request before business logic.
How:   The two guards are FastAPI dependencies; a route class runs the
       token check ahead of body parsing.

    authenticate            Router-level dependency on every protected router.
                            Reads `Authorization: Bearer <token>`, verifies it
                            and attaches the subject id to `request.state`.

    PermissionGuard(role)   Route-level dependency, built once per route with
                            the minimum role. Looks up the caller's current
                            role and compares it against the requirement.

    AuthenticatedRoute      `route_class` of every protected router. FastAPI
                            reads and validates the body before it solves
                            any dependency, so this route class checks the
                            bearer token before the body is touched.

FastAPI resolves router dependencies before route dependencies, so the
Authentication Guard always runs before the Permission Guard:

    request ──▶ AuthenticatedRoute ──▶ body parsing ──▶ authenticate
                   │ 401                   │ 400
                   ▼                       ▼
                error body              error body

            ──▶ PermissionGuard(role) ──▶ handler
                   │ 401 (no identity / user gone)
                   │ 403 (role too low)
                   ▼
                error body

Failure precedence: "who are you" (401) is always decided before "what can
you do" (403). A token whose user was deleted or deactivated is a 401.
"""

import logging
from typing import Any, Callable, Coroutine, Optional

from fastapi import Depends, Request, Response
from fastapi.routing import APIRoute
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.ext.asyncio import AsyncSession

from blog_backend.auth.roles import Role
from blog_backend.auth.tokens import TokenService, get_token_service
from blog_backend.database import get_db_session
from blog_backend.exceptions import ForbiddenError, UnauthorizedError
from blog_backend.services.user_service import user_service

logger = logging.getLogger(__name__)

# auto_error=False: a missing header yields None and the guard answers with
# the API's own 401 body instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False, description="Session token from POST /user/login")


def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """
    Authentication Guard.

    Returns:
        The subject id of the verified token (also stored on
        `request.state.subject_id` for downstream guards).

    Raises:
        UnauthorizedError: header missing, not a Bearer credential, or empty
        InvalidTokenError: token fails verification
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not logged in, please obtain a token first")

    subject_id = token_service.verify(credentials.credentials)
    request.state.subject_id = subject_id
    return subject_id


class PermissionGuard:
    """
    Permission Guard parameterized by the minimum required role.

    Usage:
        @router.delete("/{blog_id}", dependencies=[Depends(PermissionGuard(Role.ADMIN))])
    """

    def __init__(self, required_role: Role):
        self.required_role = required_role

    def __repr__(self) -> str:
        return f"PermissionGuard(required_role={self.required_role.name})"

    async def __call__(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> Role:
        subject_id = getattr(request.state, "subject_id", None)
        if not subject_id:
            raise UnauthorizedError("Not logged in or token expired, please log in again")

        role = await user_service.get_active_role(db, subject_id)
        if role is None:
            logger.info("Permission check: subject %s no longer resolves to an active user", subject_id)
            raise UnauthorizedError(
                "Not logged in or token expired, please log in again",
                context={"subject_id": subject_id},
            )

        if not role.satisfies(self.required_role):
            logger.info(
                "Permission denied: subject %s has %s, needs %s",
                subject_id,
                role.name,
                self.required_role.name,
            )
            raise ForbiddenError(
                f"Insufficient permission: requires {self.required_role.display_name} "
                f"(level {int(self.required_role)}) or above",
                context={
                    "required_role": int(self.required_role),
                    "required_role_name": self.required_role.display_name,
                },
            )
        return role


def read_bearer_token(request: Request) -> str:
    """Token from `Authorization: Bearer <token>`, or UnauthorizedError."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Not logged in, please obtain a token first")
    return token


class AuthenticatedRoute(APIRoute):
    """
    Route class for protected routers.

    Verifies the bearer token before FastAPI reads the request body, so a
    request without a valid token is a 401 even when its body is malformed.
    The `authenticate` dependency still runs afterwards and hands the
    subject id to the handler.

    Usage:
        router = APIRouter(route_class=AuthenticatedRoute, dependencies=[Depends(authenticate)])
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        route_handler = super().get_route_handler()

        async def authenticated_route_handler(request: Request) -> Response:
            get_token_service().verify(read_bearer_token(request))
            return await route_handler(request)

        return authenticated_route_handler
