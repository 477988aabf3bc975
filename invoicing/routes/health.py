"""
Health check route.

This endpoint is PUBLIC (no authentication required) and provides a simple
status check for load balancers and deployment verification.
"""

from fastapi import APIRouter

from invoicing.schemas.health import HealthResponse
from invoicing.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    status_code=200,
)
async def health_check() -> HealthResponse:
    """Public health check endpoint."""
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
