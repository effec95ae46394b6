"""Service wiring and error translation shared by the API routes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from fastapi import HTTPException, status

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import NotFoundError, PersistenceError, ValidationError, ZoneEngineError
from ..persistence.base import FareBatchRepository, ZoneBoundaryRepository
from ..persistence.memory import InMemoryFareBatchRepository, InMemoryZoneBoundaryRepository
from ..services.boundaries.locator import ZoneLocator
from ..services.boundaries.store import BoundaryStore
from ..services.compatibility.service import CompatibilityService
from ..services.fares.service import FareResolutionService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ZoneServices:
    store: BoundaryStore
    fares: FareResolutionService
    compatibility: CompatibilityService

    @property
    def locator(self) -> ZoneLocator:
        return self.fares.locator


def build_services(
    boundary_repository: ZoneBoundaryRepository,
    fare_repository: FareBatchRepository,
) -> ZoneServices:
    store = BoundaryStore(boundary_repository)
    return ZoneServices(
        store=store,
        fares=FareResolutionService(store, fare_repository),
        compatibility=CompatibilityService(store),
    )


def _repositories() -> tuple[ZoneBoundaryRepository, FareBatchRepository]:
    if settings.storage_backend == "supabase":
        from ..persistence.supabase_repository import (
            SupabaseFareBatchRepository,
            SupabaseZoneBoundaryRepository,
        )

        client = get_supabase_client()
        if client is None:
            raise RuntimeError(
                "Supabase storage selected but not configured. "
                "Set ZONE_SUPABASE_URL and ZONE_SUPABASE_KEY environment variables."
            )
        return SupabaseZoneBoundaryRepository(client), SupabaseFareBatchRepository(client)
    return InMemoryZoneBoundaryRepository(), InMemoryFareBatchRepository()


@lru_cache()
def get_services() -> ZoneServices:
    """Process-wide services for the configured storage backend."""
    boundary_repository, fare_repository = _repositories()
    logger.info(f"Using {settings.storage_backend} storage for zone boundaries")
    return build_services(boundary_repository, fare_repository)


def http_error(exc: ZoneEngineError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, PersistenceError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
