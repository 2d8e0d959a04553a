"""
Health check endpoint.
"""
from datetime import datetime

from fastapi import APIRouter

router = APIRouter(tags=["health"])

API_VERSION = "0.1.0"


@router.get("/health", summary="Service health")
async def health_check() -> dict:
    """Liveness check; does not touch the database or external providers."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": API_VERSION,
    }
