"""
Blog Backend — Token Service Tests
====================================

What:  Issue/verify behavior of TokenService.

Test Strategy:
    ✅ verify(issue(id)) returns id within the validity window
    ✅ Tampered, expired, foreign-secret and malformed tokens are refused
    ✅ Tokens without `sub` or `exp` are refused
    ✅ An empty secret is a construction error
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from blog_backend.auth.tokens import TokenService, get_token_service
from blog_backend.exceptions import InvalidTokenError, UnauthorizedError

SECRET = "unit-test-secret-value"


class TestTokenService:

    def setup_method(self):
        self.service = TokenService(secret=SECRET, expires_in=3600)

    def test_round_trip(self):
        token = self.service.issue("3f1a7c1e-1d2b-4c3d-8e9f-0a1b2c3d4e5f")
        assert self.service.verify(token) == "3f1a7c1e-1d2b-4c3d-8e9f-0a1b2c3d4e5f"

    def test_payload_claims(self):
        now = datetime.now(timezone.utc)
        token = self.service.issue("user-1", now=now)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["sub"] == "user-1"
        assert payload["exp"] - payload["iat"] == 3600
        assert set(payload) == {"sub", "iat", "exp"}

    def test_expires_in(self):
        assert self.service.expires_in == 3600

    def test_tampered_signature_rejected(self):
        token = self.service.issue("user-1")
        header, payload, signature = token.split(".")
        flipped = "A" if signature[10] != "A" else "B"
        forged = ".".join([header, payload, signature[:10] + flipped + signature[11:]])
        with pytest.raises(InvalidTokenError):
            self.service.verify(forged)

    def test_tampered_payload_rejected(self):
        other = jwt.encode(
            {"sub": "admin", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-secret",
            algorithm="HS256",
        )
        token = self.service.issue("user-1")
        header, _, signature = token.split(".")
        forged = ".".join([header, other.split(".")[1], signature])
        with pytest.raises(InvalidTokenError):
            self.service.verify(forged)

    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self.service.issue("user-1", now=issued)
        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.context["reason"] == "expired"

    def test_foreign_secret_rejected(self):
        other = TokenService(secret="another-secret-value")
        with pytest.raises(InvalidTokenError):
            self.service.verify(other.issue("user-1"))

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_malformed_rejected(self, token):
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_missing_exp_rejected(self):
        token = jwt.encode({"sub": "user-1"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_missing_sub_rejected(self):
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_invalid_token_is_unauthorized(self):
        """The guard maps InvalidTokenError to 401 through UnauthorizedError."""
        error = InvalidTokenError()
        assert isinstance(error, UnauthorizedError)
        assert error.status_code == 401
        assert error.message == "Token invalid or expired"

    def test_empty_secret_is_a_construction_error(self):
        with pytest.raises(ValueError):
            TokenService(secret="")


def test_get_token_service_uses_settings():
    service = get_token_service()
    assert service is get_token_service()
    assert service.verify(service.issue("abc")) == "abc"
