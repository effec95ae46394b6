"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...errors import ZoneEngineError
from ..dependencies import ZoneServices, get_services

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/storage", status_code=status.HTTP_200_OK)
async def health_storage(services: ZoneServices = Depends(get_services)) -> dict:
    """Check that the boundary repository answers."""
    try:
        boundaries = await services.store.list_active()
    except ZoneEngineError as exc:
        return {
            "backend": settings.storage_backend,
            "connected": False,
            "error": str(exc),
        }
    return {
        "backend": settings.storage_backend,
        "connected": True,
        "active_boundaries": len(boundaries),
    }
