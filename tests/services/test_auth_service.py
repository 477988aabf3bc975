"""
Tests for the login form handler.

The sign-in collaborator is replaced with AsyncMock fakes.
"""

from unittest.mock import AsyncMock

import pytest

from invoicing.errors import AuthFailure, AuthFailureKind
from invoicing.schemas.auth import AuthSession
from invoicing.schemas.results import Redirect
from invoicing.services.auth_service import authenticate

FORM = {"email": "user@nextmail.com", "password": "123456"}


class TestAuthenticate:
    """authenticate(): delegate, translate auth failures, propagate the rest."""

    @pytest.mark.asyncio
    async def test_success_returns_collaborator_redirect(self):
        redirect = Redirect(
            "/dashboard",
            session=AuthSession(user_id="user-1", access_token="token"),
        )
        sign_in = AsyncMock(return_value=redirect)

        result = await authenticate(None, FORM, sign_in=sign_in)

        assert result is redirect
        sign_in.assert_awaited_once_with("credentials", FORM)

    @pytest.mark.asyncio
    async def test_invalid_credentials_message(self):
        sign_in = AsyncMock(side_effect=AuthFailure(AuthFailureKind.CREDENTIALS_SIGNIN))

        result = await authenticate(None, FORM, sign_in=sign_in)

        assert result == "Invalid credentials."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind",
        [
            AuthFailureKind.CALLBACK_ROUTE_ERROR,
            AuthFailureKind.ACCESS_DENIED,
            AuthFailureKind.CONFIGURATION,
        ],
    )
    async def test_other_auth_failures_are_generic(self, kind):
        sign_in = AsyncMock(side_effect=AuthFailure(kind))

        result = await authenticate("Invalid credentials.", FORM, sign_in=sign_in)

        assert result == "Something went wrong."

    @pytest.mark.asyncio
    async def test_unclassified_errors_are_reraised(self):
        error = ConnectionError("auth service unreachable")
        sign_in = AsyncMock(side_effect=error)

        with pytest.raises(ConnectionError) as exc_info:
            await authenticate(None, FORM, sign_in=sign_in)

        assert exc_info.value is error
