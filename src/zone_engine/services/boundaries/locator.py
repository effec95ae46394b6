"""Resolve which zone boundary a coordinate falls within."""

from __future__ import annotations

import logging
import time
from typing import Optional

from ...config import settings
from ...models.domain import ZoneBoundary
from ..geospatial import point_in_ring, ring_area
from .store import BoundaryStore

logger = logging.getLogger(__name__)


class ZoneLocator:
    """Point-in-polygon lookup over the active boundaries.

    When zones overlap, the smallest one wins so the most specific zone
    decides the fare.
    """

    def __init__(self, store: BoundaryStore, cache_seconds: float | None = None) -> None:
        self.store = store
        self.cache_seconds = settings.locator_cache_seconds if cache_seconds is None else cache_seconds
        self._cached: list[ZoneBoundary] | None = None
        self._loaded_at = 0.0

    def clear_cache(self) -> None:
        self._cached = None
        self._loaded_at = 0.0

    async def _boundaries(self) -> list[ZoneBoundary]:
        fresh = self._cached is not None and (time.monotonic() - self._loaded_at) < self.cache_seconds
        if not fresh:
            self._cached = await self.store.list_active()
            self._loaded_at = time.monotonic()
            logger.debug("Loaded %d zone boundaries for lookup", len(self._cached))
        return self._cached or []

    async def locate(self, latitude: float, longitude: float) -> Optional[str]:
        matches = [
            (ring_area(boundary.points), boundary.name)
            for boundary in await self._boundaries()
            if point_in_ring(latitude, longitude, boundary.points)
        ]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "Overlapping boundaries at (%s, %s): %s",
                latitude,
                longitude,
                ", ".join(name for _, name in matches),
            )
        return min(matches)[1]
