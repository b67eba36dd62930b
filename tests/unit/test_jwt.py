# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities.

Tests the JWTManager class and token operations.
"""

import time
from unittest.mock import MagicMock

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_create_access_token_returns_valid_token(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that create_access_token returns a token string."""
        token = jwt_manager.create_access_token(user_id="prof1", role="profesor")

        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_access_token_returns_payload(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that decode_token returns subject and role."""
        token = jwt_manager.create_access_token(user_id="stu1", role="estudiante")

        payload = jwt_manager.decode_token(token, expected_type="access")

        assert isinstance(payload, TokenPayload)
        assert payload.sub == "stu1"
        assert payload.role == "estudiante"
        assert payload.type == "access"

    def test_decode_expired_token_raises_error(
        self,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that decode_token raises error for expired token."""
        jwt_settings.access_token_expire_minutes = -1
        jwt_manager = JWTManager(jwt_settings)

        token = jwt_manager.create_access_token(user_id="stu1", role="estudiante")

        with pytest.raises(TokenExpiredError, match="Token has expired"):
            jwt_manager.decode_token(token)

    def test_decode_invalid_token_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that decode_token raises error for invalid token."""
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("invalid.token.here")

    def test_decode_token_with_wrong_secret_raises_error(
        self,
        jwt_manager: JWTManager,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that decode fails when secret doesn't match."""
        token = jwt_manager.create_access_token(user_id="adm1", role="admin")

        jwt_settings.secret_key = SecretStr("different-secret-key")
        other_manager = JWTManager(jwt_settings)

        with pytest.raises(InvalidTokenError):
            other_manager.decode_token(token)

    def test_decode_token_with_wrong_type_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a token of another type is rejected."""
        now = int(time.time())
        token = jwt.encode(
            {"sub": "stu1", "role": "estudiante", "type": "refresh",
             "exp": now + 60, "iat": now, "jti": "x"},
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            jwt_manager.decode_token(token, expected_type="access")

    def test_decode_token_without_role_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a token missing the role claim is rejected."""
        now = int(time.time())
        token = jwt.encode(
            {"sub": "stu1", "type": "access", "exp": now + 60, "iat": now, "jti": "x"},
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="claims"):
            jwt_manager.decode_token(token)

    def test_verify_token(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that verify_token reports validity without raising."""
        token = jwt_manager.create_access_token(user_id="stu1", role="estudiante")

        assert jwt_manager.verify_token(token) is True
        assert jwt_manager.verify_token("invalid.token.here") is False

    def test_tokens_have_unique_jti(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens contain unique JTI claims."""
        payload1 = jwt_manager.decode_token(jwt_manager.create_access_token("stu1", "estudiante"))
        payload2 = jwt_manager.decode_token(jwt_manager.create_access_token("stu1", "estudiante"))

        assert payload1.jti != payload2.jti

    def test_token_payload_timestamps(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens have correct iat and exp timestamps."""
        before = int(time.time())
        token = jwt_manager.create_access_token(user_id="stu1", role="estudiante")
        after = int(time.time())

        payload = jwt_manager.decode_token(token)

        assert before <= payload.iat <= after
        assert abs(payload.exp - (payload.iat + 30 * 60)) <= 1
