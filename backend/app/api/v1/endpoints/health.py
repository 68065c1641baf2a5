"""
Health check endpoint.
"""

from fastapi import APIRouter
from app.services.checks.catalog import get_catalog
from app.services.circuit_breaker import get_provider_circuits

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with provider circuits and catalog status."""
    return {
        "status": "ok",
        "check_types": get_catalog().ids(),
        "provider_circuits": get_provider_circuits().get_status(),
    }
