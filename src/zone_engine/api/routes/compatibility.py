"""API routes for boundary compatibility checks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...errors import ZoneEngineError
from ...schemas.fares import CompatibilityResponse
from ..dependencies import ZoneServices, get_services, http_error

router = APIRouter(prefix="/compatibility", tags=["compatibility"])


@router.get("", response_model=CompatibilityResponse)
async def check_compatibility(
    a: str = Query(..., min_length=1, description="Boundary whose allow-list is consulted."),
    b: str = Query(..., min_length=1),
    services: ZoneServices = Depends(get_services),
) -> CompatibilityResponse:
    """Directional: true when ``b`` is on ``a``'s compatibility list."""
    try:
        compatible = await services.compatibility.is_compatible(a, b)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return CompatibilityResponse(a=a, b=b, compatible=compatible)
