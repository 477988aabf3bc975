"""
Invoice store.

Every method issues exactly one statement against the `invoices` table
(columns: id, customer_id, amount, status, date). No transactions are opened
and nothing is retried. Any failure surfaces as PersistenceFailure with the
original error attached.
"""

import logging
from typing import Any, Dict, List, Protocol, cast

from supabase import Client

from invoicing.errors import PersistenceFailure

logger = logging.getLogger(__name__)

INVOICES_TABLE = "invoices"


class InvoiceRepository(Protocol):
    """Persistence collaborator used by the invoice mutation handlers."""

    async def insert(
        self, customer_id: str, amount_in_cents: int, status: str, date: str
    ) -> None: ...

    async def update(
        self, invoice_id: str, customer_id: str, amount_in_cents: int, status: str
    ) -> None: ...

    async def delete(self, invoice_id: str) -> None: ...

    async def list_recent(self, limit: int = 50) -> List[Dict[str, Any]]: ...


class SupabaseInvoiceRepository:
    """
    InvoiceRepository backed by the Supabase REST API.

    The client should be the per-request client from get_supabase_client()
    so RLS applies.
    """

    def __init__(self, supabase_client: Client):
        self._client = supabase_client

    async def insert(
        self, customer_id: str, amount_in_cents: int, status: str, date: str
    ) -> None:
        row = {
            "customer_id": customer_id,
            "amount": amount_in_cents,
            "status": status,
            "date": date,
        }
        try:
            self._client.table(INVOICES_TABLE).insert(row).execute()
        except Exception as e:
            raise PersistenceFailure("create", e) from e

        logger.info(f"Inserted invoice for customer_id={customer_id}")

    async def update(
        self, invoice_id: str, customer_id: str, amount_in_cents: int, status: str
    ) -> None:
        changes = {
            "customer_id": customer_id,
            "amount": amount_in_cents,
            "status": status,
        }
        try:
            (
                self._client.table(INVOICES_TABLE)
                .update(changes)
                .eq("id", invoice_id)
                .execute()
            )
        except Exception as e:
            raise PersistenceFailure("update", e) from e

        logger.info(f"Updated invoice {invoice_id}")

    async def delete(self, invoice_id: str) -> None:
        try:
            self._client.table(INVOICES_TABLE).delete().eq("id", invoice_id).execute()
        except Exception as e:
            raise PersistenceFailure("delete", e) from e

        logger.info(f"Deleted invoice {invoice_id}")

    async def list_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest invoices first."""
        try:
            result = (
                self._client.table(INVOICES_TABLE)
                .select("id, customer_id, amount, status, date")
                .order("date", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise PersistenceFailure("list", e) from e

        return cast(List[Dict[str, Any]], result.data)
