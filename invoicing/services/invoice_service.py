"""
Invoice mutation handlers behind the dashboard forms.

Each handler validates its input, issues exactly one statement through the
injected InvoiceRepository, invalidates the invoice listing route and, for
create/update, hands back a Redirect to that route.

CRITICAL RULES:
1. No statement is issued when validation fails
2. Cache invalidation and redirect happen only after the statement succeeded
3. Database failures are reported with a fixed message and never retried
4. Amounts are stored as integer cents
"""

import logging
from datetime import date as date_type, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Callable, Mapping, Optional, Union

from invoicing.db.invoices import InvoiceRepository
from invoicing.schemas.invoices import (
    CreateInvoice,
    UpdateInvoice,
    form_fields,
    parse,
    safe_parse,
)
from invoicing.schemas.results import Redirect, State
from invoicing.services.route_cache import CacheInvalidator
from invoicing.utils.constants import INVOICES_ROUTE, MESSAGES

logger = logging.getLogger(__name__)


def utc_today() -> date_type:
    """Today's calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer cents, rounding half up."""
    with localcontext() as ctx:
        # Exact product and room for every integer digit of the cents value
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + 3, amount.adjusted() + 4)
        return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def create_invoice(
    previous_state: Optional[State],
    form: Mapping[str, Any],
    *,
    repository: InvoiceRepository,
    cache: CacheInvalidator,
    today: Callable[[], date_type] = utc_today,
) -> Union[State, Redirect]:
    """
    Create an invoice from the create form.

    Args:
        previous_state: State returned by the previous submission (unused)
        form: Submitted form data (customerId, amount, status)
        repository: Invoice store
        cache: Route cache for the current client
        today: Clock used to stamp the invoice date

    Returns:
        Redirect to the invoice listing on success, otherwise a State with
        field errors or a database error message.
    """
    result = safe_parse(CreateInvoice, form_fields(form))

    if not result.success:
        logger.info(f"Create invoice rejected: invalid fields {sorted(result.field_errors)}")
        return State(
            errors=result.field_errors,
            message=MESSAGES['CREATE_MISSING_FIELDS'],
        )

    invoice = result.data
    amount_in_cents = to_cents(invoice.amount)
    date = today().isoformat()

    try:
        await repository.insert(
            customer_id=invoice.customer_id,
            amount_in_cents=amount_in_cents,
            status=invoice.status,
            date=date,
        )
    except Exception as e:
        logger.error(f"Failed to create invoice: {e}", exc_info=True)
        return State(message=MESSAGES['CREATE_DB_ERROR'])

    cache.invalidate(INVOICES_ROUTE)
    return Redirect(INVOICES_ROUTE)


async def update_invoice(
    invoice_id: str,
    form: Mapping[str, Any],
    *,
    repository: InvoiceRepository,
    cache: CacheInvalidator,
) -> Union[State, Redirect]:
    """
    Update customer, amount and status of an existing invoice.

    The invoice date is never changed.

    Raises:
        ValidationFailure: If the form is invalid. Not caught here; the
            calling layer decides how to render it.
    """
    invoice = parse(UpdateInvoice, form_fields(form))
    amount_in_cents = to_cents(invoice.amount)

    try:
        await repository.update(
            invoice_id=invoice_id,
            customer_id=invoice.customer_id,
            amount_in_cents=amount_in_cents,
            status=invoice.status,
        )
    except Exception as e:
        logger.error(f"Failed to update invoice {invoice_id}: {e}", exc_info=True)
        return State(message=MESSAGES['UPDATE_DB_ERROR'])

    cache.invalidate(INVOICES_ROUTE)
    return Redirect(INVOICES_ROUTE)


async def delete_invoice(
    invoice_id: str,
    *,
    repository: InvoiceRepository,
    cache: CacheInvalidator,
) -> State:
    """
    Delete an invoice.

    No redirect: the delete button lives on the listing route itself.
    """
    try:
        await repository.delete(invoice_id)
    except Exception as e:
        logger.error(f"Failed to delete invoice {invoice_id}: {e}", exc_info=True)
        return State(message=MESSAGES['DELETE_DB_ERROR'])

    cache.invalidate(INVOICES_ROUTE)
    return State(message=MESSAGES['DELETED'])
