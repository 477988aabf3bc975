"""
Results returned by the form-handling services.

A handler either returns a State for the form to render inline, or a
Redirect that the HTTP layer turns into a navigation.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from invoicing.schemas.auth import AuthSession


class State(BaseModel):
    """
    Form state rendered next to the invoice forms.

    `errors` maps a form field name to its messages; `message` is a
    form-level summary.
    """
    errors: Optional[Dict[str, List[str]]] = Field(
        None,
        description="Per-field validation messages (only failed fields)",
        examples=[{"amount": ["Please enter an amount greater than $0."]}],
    )
    message: Optional[str] = Field(
        None,
        description="Form-level message",
        examples=["Missing Fields. Failed to Create Invoice."],
    )


@dataclass(frozen=True)
class Redirect:
    """
    Navigate the caller to `route`.

    Returned instead of a State when a handler finishes successfully.
    `session` is set only by sign-in.
    """
    route: str
    session: Optional[AuthSession] = None
