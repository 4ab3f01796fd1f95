"""Unit tests for session token verification."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import Settings, settings
from app.core.exceptions import UnauthorizedError
from app.core.security import (
    AuthenticatedUser,
    authenticate_token,
    decode_session_token,
)
from app.main import check_auth_settings
from tests.conftest import create_session_token


class TestSessionTokens:
    def test_round_trip_subject(self) -> None:
        token = create_session_token("user-123")
        assert decode_session_token(token)["sub"] == "user-123"
        assert authenticate_token(token) == AuthenticatedUser(user_id="user-123")

    def test_missing_token_unauthorized(self) -> None:
        with pytest.raises(UnauthorizedError):
            authenticate_token(None)
        with pytest.raises(UnauthorizedError):
            authenticate_token("")

    def test_garbage_token_unauthorized(self) -> None:
        with pytest.raises(UnauthorizedError):
            authenticate_token("not-a-jwt")

    def test_expired_token_unauthorized(self) -> None:
        token = create_session_token("user-123", expires_delta=timedelta(seconds=-10))
        with pytest.raises(UnauthorizedError):
            authenticate_token(token)

    def test_wrong_secret_unauthorized(self) -> None:
        token = jwt.encode({"sub": "user-123"}, "some-other-secret", algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            authenticate_token(token)

    def test_token_without_subject_unauthorized(self) -> None:
        token = create_session_token("user-123")
        claims = decode_session_token(token)
        claims.pop("sub")

        stripped = jwt.encode(claims, settings.jwt_secret_key, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            authenticate_token(stripped)

    def test_unauthorized_status(self) -> None:
        assert UnauthorizedError().status_code == 401


class TestEmptySigningKey:
    """With no signing key configured, nothing authenticates."""

    def test_token_signed_with_empty_key_rejected(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "jwt_secret_key", "")
        forged = jwt.encode({"sub": "victim"}, "", algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            authenticate_token(forged)

    def test_valid_looking_token_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        token = create_session_token("user-123")
        monkeypatch.setattr(settings, "jwt_secret_key", "")
        with pytest.raises(UnauthorizedError):
            authenticate_token(token)

    def test_startup_check_refuses_empty_key(self) -> None:
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            check_auth_settings(Settings(jwt_secret_key=""))

    def test_startup_check_accepts_configured_key(self) -> None:
        check_auth_settings(Settings(jwt_secret_key="configured"))
