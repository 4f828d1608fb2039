"""
Blog Backend — User Request/Response Schemas
==============================================

What:  Registration, login and password-reset payloads; sanitized user views.
How:   Field-level rules (username pattern, password length) are enforced by
       Pydantic and surface as 400 through the RequestValidationError handler.
       Cross-field rules (confirmation match, new != old) live in UserService.

The password hash is never part of any response model.
"""

import uuid
from datetime import datetime

from pydantic import Field

from blog_backend.schemas.common import CamelModel, RequestModel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(RequestModel):
    username: str = Field(
        pattern=r"^[a-zA-Z0-9_]{4,20}$",
        examples=["user001"],
        description="Letters, digits and underscore, 4-20 chars",
    )
    password: str = Field(min_length=6, examples=["123456"])
    confirm_password: str = Field(min_length=6, examples=["123456"])


class LoginRequest(RequestModel):
    username: str = Field(min_length=1, examples=["admin"])
    password: str = Field(min_length=6, examples=["123456"])


class ResetPasswordRequest(RequestModel):
    old_password: str = Field(min_length=6)
    new_password: str = Field(min_length=6, description="Must differ from the old password")
    confirm_new_password: str = Field(min_length=6)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserPublic(CamelModel):
    """Sanitized user record (no password)."""
    id: uuid.UUID
    username: str
    role: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserInfo(UserPublic):
    """GET /user/info payload: the sanitized record plus the role's display name."""
    role_name: str


class LoginResult(CamelModel):
    user_info: UserPublic
    token: str
    expires_in: int = Field(description="Token lifetime in seconds")
