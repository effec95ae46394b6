"""API routes for zone boundary management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...errors import ZoneEngineError
from ...schemas.boundaries import (
    BoundaryCreateRequest,
    BoundaryFaresRequest,
    BoundaryModel,
    BoundaryUpdateRequest,
    CompatibilityRequest,
    LocateResponse,
)
from ...services.export.geojson import boundaries_to_feature_collection
from ..dependencies import ZoneServices, get_services, http_error

router = APIRouter(prefix="/boundaries", tags=["boundaries"])


@router.get("", response_model=list[BoundaryModel])
async def list_boundaries(
    include_inactive: bool = Query(default=False, description="Include soft-deleted boundaries."),
    services: ZoneServices = Depends(get_services),
) -> list[BoundaryModel]:
    try:
        if include_inactive:
            boundaries = await services.store.list_all()
        else:
            boundaries = await services.store.list_active()
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return [BoundaryModel.from_domain(boundary) for boundary in boundaries]


@router.post("", response_model=BoundaryModel, status_code=status.HTTP_201_CREATED)
async def create_boundary(
    payload: BoundaryCreateRequest,
    services: ZoneServices = Depends(get_services),
) -> BoundaryModel:
    try:
        boundary = await services.store.create(payload.name, [p.to_domain() for p in payload.points])
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    services.locator.clear_cache()
    return BoundaryModel.from_domain(boundary)


@router.get("/locate", response_model=LocateResponse)
async def locate_boundary(
    latitude: float = Query(..., ge=-90.0, le=90.0),
    longitude: float = Query(..., ge=-180.0, le=180.0),
    services: ZoneServices = Depends(get_services),
) -> LocateResponse:
    try:
        name = await services.locator.locate(latitude, longitude)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return LocateResponse(latitude=latitude, longitude=longitude, boundary=name)


@router.get("/export.geojson")
async def export_boundaries(
    include_inactive: bool = Query(default=False),
    services: ZoneServices = Depends(get_services),
) -> dict:
    """Active boundaries (optionally all) as a GeoJSON FeatureCollection."""
    try:
        if include_inactive:
            boundaries = await services.store.list_all()
        else:
            boundaries = await services.store.list_active()
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return boundaries_to_feature_collection(boundaries)


@router.put("/{boundary_id}", response_model=BoundaryModel)
async def update_boundary(
    boundary_id: str,
    payload: BoundaryUpdateRequest,
    services: ZoneServices = Depends(get_services),
) -> BoundaryModel:
    points = None if payload.points is None else [p.to_domain() for p in payload.points]
    try:
        boundary = await services.store.update(boundary_id, payload.name, points)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    services.locator.clear_cache()
    return BoundaryModel.from_domain(boundary)


@router.delete("/{boundary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_boundary(
    boundary_id: str,
    services: ZoneServices = Depends(get_services),
) -> Response:
    """Soft delete: the boundary stays stored with ``is_active = False``."""
    try:
        boundary = await services.store.get(boundary_id)
        if not boundary.is_active:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Boundary {boundary.name} is already inactive",
            )
        await services.store.soft_delete(boundary_id)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    services.locator.clear_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{boundary_id}/reactivate", response_model=BoundaryModel)
async def reactivate_boundary(
    boundary_id: str,
    services: ZoneServices = Depends(get_services),
) -> BoundaryModel:
    try:
        boundary = await services.store.reactivate(boundary_id)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    services.locator.clear_cache()
    return BoundaryModel.from_domain(boundary)


@router.put("/{boundary_id}/fares", response_model=BoundaryModel)
async def update_boundary_fares(
    boundary_id: str,
    payload: BoundaryFaresRequest,
    services: ZoneServices = Depends(get_services),
) -> BoundaryModel:
    try:
        boundary = await services.fares.set_boundary_fares(boundary_id, payload.fares)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return BoundaryModel.from_domain(boundary)


@router.put("/{boundary_id}/compatibility", response_model=BoundaryModel)
async def update_compatibility(
    boundary_id: str,
    payload: CompatibilityRequest,
    services: ZoneServices = Depends(get_services),
) -> BoundaryModel:
    try:
        boundary = await services.compatibility.set_compatible(boundary_id, payload.compatible_boundaries)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return BoundaryModel.from_domain(boundary)
