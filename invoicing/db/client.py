"""
Supabase client factory.

Two kinds of clients are handed out:
1. get_supabase_client(access_token): per-request client acting as the user,
   so Row Level Security applies to every statement
2. get_auth_client(): client without a user session, used only to sign in
"""

import logging

from invoicing.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_auth_client() -> Client:
    """
    Create a Supabase client for the sign-in call.

    Uses SUPABASE_PUBLISHABLE_KEY and carries no user session.
    """
    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token, already verified by
                      invoicing/auth/dependencies.py.

    Returns:
        A Supabase client whose database calls run as that user.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> client.table("invoices").select("*").execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # PostgREST reads the user from the Authorization header
    client.postgrest.auth(access_token)

    logger.debug("Created authenticated Supabase client with user token")

    return client
