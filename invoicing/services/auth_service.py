"""
Login form handler.

Translates authentication failures into the short messages shown under the
login form. Credential checks belong to the sign-in collaborator.
"""

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from invoicing.errors import AuthFailure, AuthFailureKind
from invoicing.schemas.results import Redirect
from invoicing.utils.constants import CREDENTIALS_PROVIDER, MESSAGES

logger = logging.getLogger(__name__)

SignIn = Callable[[str, Mapping[str, Any]], Awaitable[Redirect]]


async def authenticate(
    previous_result: Optional[str],
    form: Mapping[str, Any],
    *,
    sign_in: SignIn,
) -> Union[str, Redirect]:
    """
    Sign the user in with the submitted credentials.

    Args:
        previous_result: Message from the previous attempt (threaded through
            for the login form, not read here)
        form: Submitted login form
        sign_in: Authentication collaborator

    Returns:
        The collaborator's Redirect on success, otherwise a message.

    Raises:
        Exception: Anything that is not an AuthFailure, unchanged.
    """
    try:
        return await sign_in(CREDENTIALS_PROVIDER, form)
    except AuthFailure as e:
        logger.info(f"Sign-in failed: {e.kind.value}")
        if e.kind == AuthFailureKind.CREDENTIALS_SIGNIN:
            return MESSAGES['INVALID_CREDENTIALS']
        return MESSAGES['AUTH_GENERIC']
