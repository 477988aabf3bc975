"""
Tests for the authentication dependencies.

JWT verification itself is patched; these tests cover where the token is
read from and how failures map to 401.
"""

from unittest.mock import patch

import pytest
from fastapi import HTTPException

from invoicing.auth.dependencies import get_authenticated_user, verify_access_token


class TestGetAuthenticatedUser:

    @pytest.mark.asyncio
    @patch("invoicing.auth.dependencies.verify_access_token", return_value="user-1")
    async def test_bearer_header_is_used(self, mock_verify):
        user = await get_authenticated_user(authorization="Bearer header-token", session_token=None)

        mock_verify.assert_called_once_with("header-token")
        assert user.user_id == "user-1"
        assert user.access_token == "header-token"

    @pytest.mark.asyncio
    @patch("invoicing.auth.dependencies.verify_access_token", return_value="user-1")
    async def test_session_cookie_is_fallback(self, mock_verify):
        user = await get_authenticated_user(authorization=None, session_token="cookie-token")

        mock_verify.assert_called_once_with("cookie-token")
        assert user.access_token == "cookie-token"

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization=None, session_token=None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_malformed_header_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization="Basic abc", session_token="cookie-token")

        assert exc_info.value.status_code == 401


class TestVerifyAccessToken:

    @patch("invoicing.auth.dependencies.get_jwks_client")
    def test_garbage_token_is_401(self, mock_get_jwks_client):
        from jwt.exceptions import InvalidTokenError

        mock_get_jwks_client.return_value.get_signing_key_from_jwt.side_effect = (
            InvalidTokenError("Not enough segments")
        )

        with pytest.raises(HTTPException) as exc_info:
            verify_access_token("not-a-jwt")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["error"] == "invalid_token"
