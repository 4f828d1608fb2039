"""
Blog Backend — User Service
=============================

What:  Registration, login, password reset, profile lookup, and the role
       lookup behind the Permission Guard.
How:   Stateless service; every method receives the request's AsyncSession.
       SQLAlchemy failures are wrapped in DatabaseError so no SQL detail
       reaches the client.
Who:   Called by routes/users.py, auth/guards.py and BlogService.

Login flow (POST /user/login):
    ┌────────────┐   ┌──────────────┐   ┌─────────────────┐   ┌──────────┐
    │ find user  │──▶│ active?      │──▶│ bcrypt verify   │──▶│ issue    │
    │ (username) │   │ 403 if not   │   │ 404 on mismatch │   │ token    │
    └────────────┘   └──────────────┘   └─────────────────┘   └──────────┘
          │ 404 if missing (same message as a wrong password)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_backend.auth.passwords import hash_password, verify_password
from blog_backend.auth.roles import DEFAULT_ROLE, Role
from blog_backend.auth.tokens import TokenService
from blog_backend.exceptions import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from blog_backend.models.user import User
from blog_backend.schemas.user import (
    LoginRequest,
    LoginResult,
    RegisterRequest,
    ResetPasswordRequest,
    UserInfo,
    UserPublic,
)

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = "Incorrect username or password"


def parse_id(value: str) -> Optional[uuid.UUID]:
    """Parse a path or token identifier; None when it is not a UUID."""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class UserService:
    """
    Business logic layer for accounts.

    Error mapping:
        password mismatch / bad reset input → ValidationError (400)
        username taken                      → ConflictError (409)
        unknown user / wrong password       → NotFoundError (404)
        disabled account at login           → ForbiddenError (403)
    """

    async def register(self, db: AsyncSession, data: RegisterRequest) -> UserPublic:
        """
        Create an account with role Normal and is_active=True.

        Raises:
            ValidationError: password and confirmation differ
            ConflictError:   username already registered
        """
        if data.password != data.confirm_password:
            raise ValidationError(
                "Password and confirmation do not match",
                field="confirmPassword",
            )

        try:
            existing = await db.execute(
                select(User.id).where(User.username == data.username)
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    "Username is already taken, please choose another one",
                    context={"username": data.username},
                )

            user = User(
                username=data.username,
                password=await hash_password(data.password),
                role=int(DEFAULT_ROLE),
                is_active=True,
            )
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            raise ConflictError(
                "Username is already taken, please choose another one",
                context={"username": data.username},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", data.username, str(e))
            raise DatabaseError(context={"operation": "register"})

        logger.info("User registered: %s (%s)", user.username, user.id)
        return UserPublic.model_validate(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
        token_service: TokenService,
    ) -> LoginResult:
        """
        Verify credentials and issue a session token.

        Raises:
            NotFoundError:  unknown username or wrong password
            ForbiddenError: account disabled
        """
        user = await self._find_by_username(db, data.username)
        if user is None:
            raise NotFoundError(resource="user", message=BAD_CREDENTIALS)

        if not user.is_active:
            logger.info("Login refused for disabled account %s", user.id)
            raise ForbiddenError("Account is disabled, please contact an administrator")

        if not await verify_password(data.password, user.password):
            raise NotFoundError(resource="user", message=BAD_CREDENTIALS)

        token = token_service.issue(str(user.id))
        logger.info("User logged in: %s", user.id)
        return LoginResult(
            user_info=UserPublic.model_validate(user),
            token=token,
            expires_in=token_service.expires_in,
        )

    async def reset_password(
        self,
        db: AsyncSession,
        user_id: str,
        data: ResetPasswordRequest,
    ) -> None:
        """
        Replace the caller's password after checking the old one.

        Check order: confirmation match, new != old, user exists, old
        password correct.
        """
        if data.new_password != data.confirm_new_password:
            raise ValidationError(
                "New password and confirmation do not match",
                field="confirmNewPassword",
            )
        if data.new_password == data.old_password:
            raise ValidationError(
                "New password must differ from the old password",
                field="newPassword",
            )

        user = await self._get(db, user_id)
        if user is None:
            raise NotFoundError(resource="user", message="User does not exist")

        if not await verify_password(data.old_password, user.password):
            raise ValidationError("Old password is incorrect", field="oldPassword")

        user.password = await hash_password(data.new_password)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error resetting password for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "reset_password"})
        logger.info("Password reset for user %s", user_id)

    async def get_info(self, db: AsyncSession, user_id: str) -> UserInfo:
        """Sanitized profile of the caller, with the role's display name."""
        user_uuid = parse_id(user_id)
        row = None
        if user_uuid is not None:
            try:
                result = await db.execute(
                    select(
                        User.id,
                        User.username,
                        User.role,
                        User.is_active,
                        User.created_at,
                        User.updated_at,
                    ).where(User.id == user_uuid)
                )
                row = result.one_or_none()
            except SQLAlchemyError as e:
                logger.error("Database error fetching user %s: %s", user_id, str(e))
                raise DatabaseError(context={"operation": "get_info"})

        if row is None:
            raise NotFoundError(resource="user", message="User does not exist")

        return UserInfo(
            id=row.id,
            username=row.username,
            role=row.role,
            is_active=row.is_active,
            created_at=row.created_at,
            updated_at=row.updated_at,
            role_name=Role(row.role).display_name,
        )

    async def get_active_role(self, db: AsyncSession, user_id: str) -> Optional[Role]:
        """
        Current role of an active user, or None when the id does not resolve.

        Reads only the role and active columns. None covers: id not a UUID,
        user deleted, user disabled.
        """
        user_uuid = parse_id(user_id)
        if user_uuid is None:
            return None
        try:
            result = await db.execute(
                select(User.role, User.is_active).where(User.id == user_uuid)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error reading role for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "get_active_role"})

        if row is None or not row.is_active:
            return None
        return Role(row.role)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "find_by_username"})

    async def _get(self, db: AsyncSession, user_id: str) -> Optional[User]:
        user_uuid = parse_id(user_id)
        if user_uuid is None:
            return None
        try:
            result = await db.execute(select(User).where(User.id == user_uuid))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "get_user"})


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
