"""
FastAPI routers for the invoicing backend.

Each module defines a router for one area (auth, invoices, health).
Routes parse the request, call a service handler and map its result
(State or Redirect) to an HTTP response.
"""
