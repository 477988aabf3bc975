"""
Failure variants raised across the invoicing backend.

Each failure is its own exception type carrying a tag, so handlers can
decide per variant whether to translate it locally or let it propagate:

- AuthFailure: sign-in rejected by the authentication collaborator
- ValidationFailure: form input rejected by the invoice schema
- PersistenceFailure: the invoice store rejected or failed a statement
"""

from enum import Enum
from typing import Dict, List, Optional


class AuthFailureKind(str, Enum):
    """Recognised authentication failure kinds."""
    CREDENTIALS_SIGNIN = "CredentialsSignin"
    CALLBACK_ROUTE_ERROR = "CallbackRouteError"
    ACCESS_DENIED = "AccessDenied"
    CONFIGURATION = "Configuration"


class AuthFailure(Exception):
    """
    Sign-in failure classified by the authentication collaborator.

    Attributes:
        kind: Which recognised failure occurred
    """

    def __init__(self, kind: AuthFailureKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)


class ValidationFailure(Exception):
    """
    Form input rejected by the invoice validation schema.

    Attributes:
        field_errors: Field name -> ordered list of messages, failed fields only
    """

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        super().__init__(f"Invalid fields: {', '.join(sorted(field_errors))}")


class PersistenceFailure(Exception):
    """
    A single statement against the invoice store failed.

    The underlying cause is kept for logging only; callers never branch on it.

    Attributes:
        operation: "create", "update", "delete" or "list"
        cause: The original exception, if any
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} invoice")
