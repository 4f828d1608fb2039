"""
Blog Backend — Session Token Service
======================================

What:  Issues and verifies signed, time-limited bearer tokens (JWT, HS256).
How:   The payload carries only the subject id (`sub`) plus the standard
       `iat`/`exp` claims. Roles and other mutable state are looked up from
       the store at check time and never embedded in the token.
Who:   UserService.login issues; the Authentication Guard verifies.

Tokens are stateless: verification is purely cryptographic and never
touches the database. There is no revocation.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt

from blog_backend.config import settings
from blog_backend.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


class TokenService:
    """Signs and verifies session tokens with a shared HMAC secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: int = 86_400,
    ):
        if not secret:
            raise ValueError("TokenService requires a non-empty signing secret")
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @property
    def expires_in(self) -> int:
        """Validity window of issued tokens, in seconds."""
        return self._expires_in

    def issue(self, subject_id: str, now: Optional[datetime] = None) -> str:
        """
        Sign a token for the given subject.

        Args:
            subject_id: Identifier of the user the token speaks for
            now:        Issue time override (tests); defaults to current UTC time
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(seconds=self._expires_in)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Validate a token and return its subject id.

        Raises:
            InvalidTokenError: bad signature, malformed token, missing
                               claims, or expired validity window
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            raise InvalidTokenError(context={"reason": "expired"})
        except jwt.PyJWTError as e:
            logger.debug("Rejected invalid token: %s", type(e).__name__)
            raise InvalidTokenError(context={"reason": type(e).__name__})

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError(context={"reason": "empty subject"})
        return subject


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """FastAPI dependency returning the process-wide TokenService."""
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.jwt_expires_in,
    )
