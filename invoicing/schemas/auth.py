"""
Pydantic schemas for the sign-in form.

These models define the credential shape accepted by the credentials
provider and the session it hands back.
"""

from typing import Optional
from pydantic import BaseModel, Field


class CredentialsForm(BaseModel):
    """
    Credentials submitted by the login form.

    Parsed by the credentials provider, never by the authenticate handler.
    """
    email: str = Field(
        ...,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Account e-mail address",
        examples=["user@nextmail.com"],
    )
    password: str = Field(..., min_length=6, description="Account password")


class AuthSession(BaseModel):
    """Session established by a successful sign-in."""
    user_id: str = Field(..., description="User UUID (JWT 'sub' claim)")
    email: Optional[str] = Field(None, description="User's e-mail address")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: Optional[str] = Field(None, description="Refresh token")
    expires_in: Optional[int] = Field(None, description="Access token lifetime in seconds")


class LoginErrorResponse(BaseModel):
    """Response for POST /login when sign-in fails."""
    message: str = Field(
        ...,
        description="Message shown under the login form",
        examples=["Invalid credentials."]
    )
