"""Per-boundary allow-lists used by the pooling dispatcher."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable

from ...models.domain import ZoneBoundary, canonical_name
from ..boundaries.store import BoundaryStore

logger = logging.getLogger(__name__)


def _dedupe(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for name in names:
        key = canonical_name(name)
        if key and key not in seen:
            seen.add(key)
            ordered.append(key)
    return ordered


class CompatibilityService:
    """Directional compatibility: ``is_compatible(a, b)`` does not imply ``is_compatible(b, a)``."""

    def __init__(self, store: BoundaryStore) -> None:
        self.store = store

    async def set_compatible(self, boundary_id: str, compatible_names: Iterable[str]) -> ZoneBoundary:
        """Overwrite the boundary's full compatibility list."""

        boundary = await self.store.get(boundary_id)
        names = _dedupe(compatible_names)
        saved = await self.store.save(dataclasses.replace(boundary, compatible_boundaries=names))
        logger.info("Updated compatible boundaries for %s: %s", boundary.name, names)
        return saved

    async def compatible_with(self, boundary_name: str) -> list[str]:
        boundary = await self.store.find_by_name(boundary_name)
        if boundary is None:
            return []
        return list(boundary.compatible_boundaries)

    async def is_compatible(self, boundary_a: str, boundary_b: str) -> bool:
        wanted = canonical_name(boundary_b)
        return any(canonical_name(name) == wanted for name in await self.compatible_with(boundary_a))
