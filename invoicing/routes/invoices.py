"""
Invoice dashboard endpoints.

- GET  /dashboard/invoices                     - Invoice listing (cached per user)
- POST /dashboard/invoices                     - Create invoice form
- POST /dashboard/invoices/{invoice_id}/edit   - Update invoice form
- POST /dashboard/invoices/{invoice_id}/delete - Delete button

Successful create/update answer with 303 to the listing. Failed submissions
answer with the form State so the page can render it inline.

All endpoints require an authenticated user.
"""

import logging
import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from invoicing.auth.dependencies import AuthenticatedUser, get_authenticated_user
from invoicing.db.client import get_supabase_client
from invoicing.db.invoices import InvoiceRepository, SupabaseInvoiceRepository
from invoicing.errors import PersistenceFailure, ValidationFailure
from invoicing.routes.responses import result_response, state_response
from invoicing.schemas.invoices import InvoiceListResponse, InvoiceSummary
from invoicing.schemas.results import State
from invoicing.services.invoice_service import (
    create_invoice,
    delete_invoice,
    update_invoice,
)
from invoicing.services.route_cache import ClientRouteCache, route_cache
from invoicing.utils.constants import INVOICES_ROUTE, MESSAGES

logger = logging.getLogger(__name__)

router = APIRouter(prefix=INVOICES_ROUTE, tags=["invoices"])

# Distinguishes ETags issued by different processes
_BOOT_ID = uuid.uuid4().hex[:8]


def get_invoice_repository(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> InvoiceRepository:
    return SupabaseInvoiceRepository(get_supabase_client(auth_user.access_token))


def get_client_cache(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> ClientRouteCache:
    return route_cache.bind(auth_user.user_id)


def _etag(revision: int) -> str:
    return f'W/"{_BOOT_ID}-{revision}"'


@router.get(
    "",
    response_model=InvoiceListResponse,
    status_code=status.HTTP_200_OK,
    summary="List invoices",
    description="""
    Latest invoices of the authenticated user, newest first.

    The rendered listing is cached per user until an invoice mutation
    invalidates it. The ETag changes on every invalidation, so clients
    holding a stale copy refetch.
    """
)
async def list_invoices(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    repository: Annotated[InvoiceRepository, Depends(get_invoice_repository)],
    cache: Annotated[ClientRouteCache, Depends(get_client_cache)],
    if_none_match: Annotated[Optional[str], Header()] = None,
):
    revision = cache.revision(INVOICES_ROUTE)
    etag = _etag(revision)
    snapshot = cache.get(INVOICES_ROUTE)

    if snapshot is not None and if_none_match == etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    if snapshot is None:
        try:
            rows = await repository.list_recent()
        except PersistenceFailure as e:
            logger.error(f"Failed to fetch invoices: {e.cause}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "error": "fetch_error",
                    "details": "Failed to retrieve invoices from database"
                }
            )

        invoices = [
            InvoiceSummary(
                id=str(row.get("id")),
                customer_id=str(row.get("customer_id")),
                amount=int(row.get("amount", 0)),
                status=row.get("status"),
                date=str(row.get("date")),
            )
            for row in rows
        ]
        snapshot = InvoiceListResponse(invoices=invoices, count=len(invoices))
        cache.put(INVOICES_ROUTE, snapshot, revision)

        logger.info(f"Rendered {len(invoices)} invoices for user {auth_user.user_id}")

    return JSONResponse(
        content=snapshot.model_dump(),
        headers={"ETag": etag, "Cache-Control": "private, no-cache"},
    )


@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create an invoice",
    responses={status.HTTP_200_OK: {"model": State, "description": "Form state"}},
)
async def create_invoice_form(
    request: Request,
    repository: Annotated[InvoiceRepository, Depends(get_invoice_repository)],
    cache: Annotated[ClientRouteCache, Depends(get_client_cache)],
):
    """
    Create an invoice from form fields customerId, amount and status.

    The invoice date is set by the server.
    """
    form = await request.form()
    result = await create_invoice(None, form, repository=repository, cache=cache)
    return result_response(result)


@router.post(
    "/{invoice_id}/edit",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Update an invoice",
    responses={
        status.HTTP_200_OK: {"model": State, "description": "Database error"},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": State, "description": "Invalid fields"},
    },
)
async def update_invoice_form(
    invoice_id: str,
    request: Request,
    repository: Annotated[InvoiceRepository, Depends(get_invoice_repository)],
    cache: Annotated[ClientRouteCache, Depends(get_client_cache)],
):
    """
    Update customerId, amount and status of an invoice.

    Invalid fields are answered with 422 and per-field errors; database
    failures with 200 and the database error message.
    """
    form = await request.form()
    try:
        result = await update_invoice(invoice_id, form, repository=repository, cache=cache)
    except ValidationFailure as e:
        logger.info(f"Update of invoice {invoice_id} rejected: invalid fields {sorted(e.field_errors)}")
        return state_response(
            State(errors=e.field_errors, message=MESSAGES['UPDATE_MISSING_FIELDS']),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    return result_response(result)


@router.post(
    "/{invoice_id}/delete",
    response_model=State,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Delete an invoice",
)
async def delete_invoice_form(
    invoice_id: str,
    repository: Annotated[InvoiceRepository, Depends(get_invoice_repository)],
    cache: Annotated[ClientRouteCache, Depends(get_client_cache)],
) -> State:
    """Delete an invoice. The listing refreshes itself, so no redirect."""
    return await delete_invoice(invoice_id, repository=repository, cache=cache)
