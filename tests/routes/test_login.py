"""
Tests for POST /login.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from invoicing.errors import AuthFailure, AuthFailureKind
from invoicing.main import app
from invoicing.routes.auth import get_sign_in
from invoicing.schemas.auth import AuthSession
from invoicing.schemas.results import Redirect

FORM = {"email": "user@nextmail.com", "password": "123456"}


@pytest.fixture
def client():
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def sign_in():
    """Override the sign-in collaborator."""
    mock_sign_in = AsyncMock()
    app.dependency_overrides[get_sign_in] = lambda: mock_sign_in
    yield mock_sign_in
    app.dependency_overrides.clear()


class TestLogin:

    def test_success_redirects_and_sets_session_cookie(self, client, sign_in):
        sign_in.return_value = Redirect(
            "/dashboard",
            session=AuthSession(user_id="user-1", access_token="access-token", expires_in=3600),
        )

        response = client.post("/login", data=FORM)

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert "session-token=access-token" in response.headers["set-cookie"]
        assert "httponly" in response.headers["set-cookie"].lower()

        provider, form = sign_in.await_args.args
        assert provider == "credentials"
        assert form["email"] == "user@nextmail.com"

    def test_invalid_credentials_returns_message(self, client, sign_in):
        sign_in.side_effect = AuthFailure(AuthFailureKind.CREDENTIALS_SIGNIN)

        response = client.post("/login", data=FORM)

        assert response.status_code == 200
        assert response.json() == {"message": "Invalid credentials."}

    def test_other_auth_failure_returns_generic_message(self, client, sign_in):
        sign_in.side_effect = AuthFailure(AuthFailureKind.CALLBACK_ROUTE_ERROR)

        response = client.post("/login", data={**FORM, "previous_result": "Invalid credentials."})

        assert response.status_code == 200
        assert response.json() == {"message": "Something went wrong."}
