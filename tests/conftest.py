"""
Pytest configuration for the invoicing backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def repository():
    """Invoice store fake; every statement succeeds unless told otherwise."""
    mock_repository = Mock()
    mock_repository.insert = AsyncMock(return_value=None)
    mock_repository.update = AsyncMock(return_value=None)
    mock_repository.delete = AsyncMock(return_value=None)
    mock_repository.list_recent = AsyncMock(return_value=[])
    return mock_repository


@pytest.fixture
def cache():
    """Recording cache invalidator."""
    return Mock()


@pytest.fixture
def valid_form():
    """A complete create/update form submission."""
    return {
        "customerId": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
        "amount": "120.50",
        "status": "pending",
    }
