"""API routes for fare lookup and destination fare tables."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...errors import ZoneEngineError
from ...schemas.fares import (
    DestinationFaresRequest,
    DestinationFaresResponse,
    FareLookupResponse,
    TripFareResponse,
)
from ...services.fares.service import NO_FARES_MESSAGE
from ..dependencies import ZoneServices, get_services, http_error

router = APIRouter(prefix="/fares", tags=["fares"])


@router.get("", response_model=FareLookupResponse)
async def get_fare(
    from_boundary: str = Query(..., min_length=1),
    to: str = Query(..., min_length=1, description="Target boundary or destination name."),
    services: ZoneServices = Depends(get_services),
) -> FareLookupResponse:
    try:
        fare = await services.fares.get_fare(from_boundary, to)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return FareLookupResponse(from_boundary=from_boundary, to=to, fare=fare)


@router.get("/trip", response_model=TripFareResponse)
async def get_trip_fare(
    pickup_latitude: float = Query(..., ge=-90.0, le=90.0),
    pickup_longitude: float = Query(..., ge=-180.0, le=180.0),
    destination: str = Query(default=""),
    destination_latitude: float = Query(..., ge=-90.0, le=90.0),
    destination_longitude: float = Query(..., ge=-180.0, le=180.0),
    services: ZoneServices = Depends(get_services),
) -> TripFareResponse:
    try:
        fare = await services.fares.resolve_trip_fare(
            pickup_latitude,
            pickup_longitude,
            destination,
            destination_latitude,
            destination_longitude,
        )
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return TripFareResponse(destination=destination, fare=fare)


@router.get("/destinations/{destination}", response_model=DestinationFaresResponse)
async def get_destination_fares(
    destination: str,
    services: ZoneServices = Depends(get_services),
) -> DestinationFaresResponse:
    try:
        fares = await services.fares.fares_for_destination(destination)
        display = await services.fares.display_string(destination)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return DestinationFaresResponse(destination=destination, fares=fares, display=display)


@router.put("/destinations/{destination}", response_model=DestinationFaresResponse)
async def set_destination_fares(
    destination: str,
    payload: DestinationFaresRequest,
    services: ZoneServices = Depends(get_services),
) -> DestinationFaresResponse:
    """Replace the destination's fare table wholesale; an empty mapping clears it."""
    try:
        batch = await services.fares.set_fares_for_destination(destination, payload.fares)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    if batch is None:
        return DestinationFaresResponse(destination=destination, fares={}, display=NO_FARES_MESSAGE)
    fares = {rule.from_boundary: rule.fare for rule in batch.rules}
    try:
        display = await services.fares.display_string(destination)
    except ZoneEngineError as exc:
        raise http_error(exc) from exc
    return DestinationFaresResponse(destination=destination, fares=fares, display=display)
