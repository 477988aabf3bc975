"""
Database access layer for the invoicing backend.

All database operations MUST:
- Go through the per-request client so Row Level Security applies
- Issue one statement per mutation (no transactions, no retries)

DO NOT define table schemas, migrations, or RLS policies here.

Includes:
- Supabase client initialization
- The invoice store used by the mutation handlers
"""

from .client import get_auth_client, get_supabase_client
from .invoices import InvoiceRepository, SupabaseInvoiceRepository

__all__ = [
    "get_auth_client",
    "get_supabase_client",
    "InvoiceRepository",
    "SupabaseInvoiceRepository",
]
