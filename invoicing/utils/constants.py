"""
Route paths and user-facing messages shared by the mutation handlers.

The message strings are rendered verbatim by the dashboard forms, so they
must not change without a matching frontend change.
"""

# Route whose cached view is invalidated after every invoice mutation
INVOICES_ROUTE = "/dashboard/invoices"

# Landing route after a successful sign-in
DASHBOARD_ROUTE = "/dashboard"

# Only sign-in mechanism this backend knows about
CREDENTIALS_PROVIDER = "credentials"

INVOICE_STATUSES = ("pending", "paid")

MESSAGES = {
    # Authentication
    'INVALID_CREDENTIALS': 'Invalid credentials.',
    'AUTH_GENERIC': 'Something went wrong.',

    # Field validation
    'CUSTOMER_REQUIRED': 'Please select a customer.',
    'AMOUNT_POSITIVE': 'Please enter an amount greater than $0.',
    'AMOUNT_NOT_A_NUMBER': 'Expected number, received nan',
    'STATUS_REQUIRED': 'Please select an invoice status.',

    # Mutation outcomes
    'CREATE_MISSING_FIELDS': 'Missing Fields. Failed to Create Invoice.',
    'UPDATE_MISSING_FIELDS': 'Missing Fields. Failed to Update Invoice.',
    'CREATE_DB_ERROR': 'Database Error: Failed to create invoice.',
    'UPDATE_DB_ERROR': 'Database Error: Failed to update invoice.',
    'DELETE_DB_ERROR': 'Database Error: Failed to delete invoice',
    'DELETED': 'Deleted Invoice.',
}
