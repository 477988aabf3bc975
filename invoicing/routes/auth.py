"""
Login endpoint.

- POST /login - Sign in with the credentials form

On success the browser is redirected to the dashboard and the session
access token is stored in an HTTP-only cookie.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from invoicing.auth.credentials import SupabaseCredentialsProvider
from invoicing.config import settings
from invoicing.db.client import get_auth_client
from invoicing.routes.responses import redirect_response
from invoicing.schemas.auth import LoginErrorResponse
from invoicing.schemas.results import Redirect
from invoicing.services.auth_service import SignIn, authenticate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def get_sign_in() -> SignIn:
    """Authentication collaborator for the login form."""
    return SupabaseCredentialsProvider(get_auth_client).sign_in


@router.post(
    "/login",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Sign in with e-mail and password",
    responses={
        status.HTTP_200_OK: {
            "model": LoginErrorResponse,
            "description": "Sign-in failed; message for the login form",
        },
    },
)
async def login(
    request: Request,
    sign_in: Annotated[SignIn, Depends(get_sign_in)],
):
    """
    Sign the user in from the login form.

    Form fields: email, password and optionally previous_result (the
    message rendered by the previous attempt).
    """
    form = await request.form()

    result = await authenticate(form.get("previous_result"), form, sign_in=sign_in)

    if not isinstance(result, Redirect):
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=LoginErrorResponse(message=result).model_dump(),
        )

    response = redirect_response(result)
    if result.session is not None:
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=result.session.access_token,
            max_age=result.session.expires_in,
            httponly=True,
            secure=settings.is_production(),
            samesite="lax",
        )
    return response
