"""Invoicing dashboard backend: form handlers for sign-in and invoice mutations."""
