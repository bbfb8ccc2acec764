"""Health check endpoints."""

from fastapi import APIRouter

from splitswap.chains import get_supported_networks
from splitswap.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "splitswap"}


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with configuration info."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "splitswap",
        "version": "0.1.0",
        "networks": get_supported_networks(),
        "config": settings.get_safe_dict(),
    }
