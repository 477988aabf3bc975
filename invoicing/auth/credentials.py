"""
Credentials sign-in backed by Supabase Auth.

SupabaseCredentialsProvider is the authentication collaborator behind the
login form. It owns everything about credentials: parsing the form,
checking the password with Supabase and establishing the session. Failures
are classified into AuthFailure kinds; anything that is not an
authentication problem propagates untouched.
"""

import logging
from typing import Any, Callable, Mapping

from pydantic import ValidationError
from supabase import Client
from supabase_auth.errors import AuthApiError, AuthError

from invoicing.errors import AuthFailure, AuthFailureKind
from invoicing.schemas.auth import AuthSession, CredentialsForm
from invoicing.schemas.results import Redirect
from invoicing.utils.constants import CREDENTIALS_PROVIDER, DASHBOARD_ROUTE

logger = logging.getLogger(__name__)

# Supabase Auth error code for a wrong e-mail/password pair
INVALID_CREDENTIALS_CODE = "invalid_credentials"


def _is_invalid_credentials(error: AuthApiError) -> bool:
    return getattr(error, "code", None) == INVALID_CREDENTIALS_CODE or error.status == 400


class SupabaseCredentialsProvider:
    """
    Sign users in with e-mail and password.

    Args:
        client_factory: Returns a Supabase client without a user session
    """

    def __init__(self, client_factory: Callable[[], Client]):
        self._client_factory = client_factory

    async def sign_in(self, provider: str, form: Mapping[str, Any]) -> Redirect:
        """
        Verify the submitted credentials and establish a session.

        Returns:
            Redirect to the dashboard carrying the new session.

        Raises:
            AuthFailure: CredentialsSignin for rejected credentials,
                CallbackRouteError for other Supabase Auth errors,
                Configuration for an unknown provider.
        """
        if provider != CREDENTIALS_PROVIDER:
            logger.error(f"Unknown sign-in provider: {provider}")
            raise AuthFailure(AuthFailureKind.CONFIGURATION, f"Unknown provider '{provider}'")

        try:
            credentials = CredentialsForm(
                email=form.get("email"),
                password=form.get("password"),
            )
        except ValidationError:
            logger.info("Sign-in rejected: malformed credentials")
            raise AuthFailure(AuthFailureKind.CREDENTIALS_SIGNIN)

        client = self._client_factory()

        try:
            response = client.auth.sign_in_with_password(
                {"email": credentials.email, "password": credentials.password}
            )
        except AuthApiError as e:
            if _is_invalid_credentials(e):
                logger.info("Sign-in rejected: invalid credentials")
                raise AuthFailure(AuthFailureKind.CREDENTIALS_SIGNIN) from e
            logger.warning(f"Supabase Auth API error during sign-in: {e.status} {e.code}")
            raise AuthFailure(AuthFailureKind.CALLBACK_ROUTE_ERROR, str(e)) from e
        except AuthError as e:
            logger.warning(f"Supabase Auth error during sign-in: {e}")
            raise AuthFailure(AuthFailureKind.CALLBACK_ROUTE_ERROR, str(e)) from e

        if response.session is None or response.user is None:
            logger.info("Sign-in returned no session")
            raise AuthFailure(AuthFailureKind.CREDENTIALS_SIGNIN)

        logger.info(f"User {response.user.id} signed in")

        session = AuthSession(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            expires_in=response.session.expires_in,
        )
        return Redirect(DASHBOARD_ROUTE, session=session)
