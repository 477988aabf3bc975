"""
Service layer for the invoicing backend.

Contains the form handlers that:
- Validate submitted forms
- Call the persistence and authentication collaborators
- Invalidate cached routes after mutations
- Return a State for the form or a Redirect
"""

from .auth_service import authenticate
from .invoice_service import create_invoice, delete_invoice, update_invoice

__all__ = [
    "authenticate",
    "create_invoice",
    "delete_invoice",
    "update_invoice",
]
