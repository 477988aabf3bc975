"""
FastAPI dependency functions for authentication.

These functions verify the Supabase access token on dashboard requests and
extract the authenticated user_id. The token is read from the
Authorization header, or from the session cookie set by the login form.

Tokens are verified against the project's JWT Signing Keys (ES256 via JWKS).
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Cookie, Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from invoicing.config import settings

logger = logging.getLogger(__name__)

# Lazily created; PyJWKClient caches keys and handles rotation
_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token (for creating authenticated Supabase clients)
    """
    user_id: str
    access_token: str


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_token(authorization: Optional[str], session_token: Optional[str]) -> str:
    """Pick the bearer token, falling back to the session cookie."""
    if authorization:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("Invalid Authorization header format")
            raise _unauthorized("unauthorized", "Invalid Authorization header format")
        return parts[1]

    if session_token:
        return session_token

    logger.warning("Missing Authorization header and session cookie")
    raise _unauthorized("unauthorized", "Missing Authorization header")


def verify_access_token(token: str) -> str:
    """
    Verify a Supabase access token and return its user_id.

    Raises:
        HTTPException: 401 if the token is invalid, expired or unverifiable
    """
    try:
        jwks_client = get_jwks_client()
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        # Supabase issues tokens from <project-url>/auth/v1
        issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

        payload = decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except ValueError as e:
        logger.error(f"Token verification misconfigured: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")

    user_id = payload.get("sub")

    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    logger.info(f"Token verified successfully for user_id={user_id}")
    return str(user_id)


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None,
    session_token: Annotated[
        str | None, Cookie(alias=settings.SESSION_COOKIE_NAME)
    ] = None,
) -> AuthenticatedUser:
    """
    Verify the request's token and return the user with the token.

    Usage:
        @router.post("/dashboard/invoices")
        async def create(auth_user: AuthenticatedUser = Depends(get_authenticated_user)):
            supabase_client = get_supabase_client(auth_user.access_token)

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = _extract_token(authorization, session_token)
    user_id = verify_access_token(token)
    return AuthenticatedUser(user_id=user_id, access_token=token)
