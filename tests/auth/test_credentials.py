"""
Tests for the Supabase credentials provider.

The Supabase client is a MagicMock; Supabase Auth errors are the real
supabase_auth exception types.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from supabase_auth.errors import AuthApiError, AuthError

from invoicing.auth.credentials import SupabaseCredentialsProvider
from invoicing.errors import AuthFailure, AuthFailureKind
from invoicing.schemas.results import Redirect

FORM = {"email": "user@nextmail.com", "password": "123456"}


@pytest.fixture
def auth_client():
    client = MagicMock()
    client.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=SimpleNamespace(id="user-uuid-1", email="user@nextmail.com"),
        session=SimpleNamespace(
            access_token="access-token",
            refresh_token="refresh-token",
            expires_in=3600,
        ),
    )
    return client


@pytest.fixture
def provider(auth_client):
    return SupabaseCredentialsProvider(lambda: auth_client)


class TestSignIn:
    """sign_in(): parse credentials, call Supabase, classify failures."""

    @pytest.mark.asyncio
    async def test_success_redirects_to_dashboard_with_session(self, provider, auth_client):
        result = await provider.sign_in("credentials", FORM)

        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "user@nextmail.com", "password": "123456"}
        )
        assert isinstance(result, Redirect)
        assert result.route == "/dashboard"
        assert result.session.user_id == "user-uuid-1"
        assert result.session.access_token == "access-token"
        assert result.session.expires_in == 3600

    @pytest.mark.asyncio
    async def test_unknown_provider_is_configuration_failure(self, provider, auth_client):
        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("github", FORM)

        assert exc_info.value.kind == AuthFailureKind.CONFIGURATION
        auth_client.auth.sign_in_with_password.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "form",
        [
            {"email": "not-an-email", "password": "123456"},
            {"email": "user@nextmail.com", "password": "123"},
            {"email": "user@nextmail.com"},
            {},
        ],
    )
    async def test_malformed_credentials_are_rejected_locally(self, provider, auth_client, form):
        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("credentials", form)

        assert exc_info.value.kind == AuthFailureKind.CREDENTIALS_SIGNIN
        auth_client.auth.sign_in_with_password.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_password_is_credentials_failure(self, provider, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("credentials", FORM)

        assert exc_info.value.kind == AuthFailureKind.CREDENTIALS_SIGNIN

    @pytest.mark.asyncio
    async def test_other_api_errors_are_callback_failures(self, provider, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Database error querying schema", 500, "unexpected_failure"
        )

        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("credentials", FORM)

        assert exc_info.value.kind == AuthFailureKind.CALLBACK_ROUTE_ERROR

    @pytest.mark.asyncio
    async def test_generic_auth_errors_are_callback_failures(self, provider, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthError("boom", None)

        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("credentials", FORM)

        assert exc_info.value.kind == AuthFailureKind.CALLBACK_ROUTE_ERROR

    @pytest.mark.asyncio
    async def test_missing_session_is_credentials_failure(self, provider, auth_client):
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=None, session=None
        )

        with pytest.raises(AuthFailure) as exc_info:
            await provider.sign_in("credentials", FORM)

        assert exc_info.value.kind == AuthFailureKind.CREDENTIALS_SIGNIN

    @pytest.mark.asyncio
    async def test_non_auth_errors_propagate(self, provider, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = TimeoutError("timed out")

        with pytest.raises(TimeoutError):
            await provider.sign_in("credentials", FORM)
