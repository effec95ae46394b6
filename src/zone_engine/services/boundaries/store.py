"""Canonical collection of persisted zone boundaries."""

from __future__ import annotations

import dataclasses
import logging
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from ...config import settings
from ...errors import NotFoundError, ValidationError
from ...models.domain import BoundaryPoint, ZoneBoundary, canonical_name, now_millis
from ...models.result import Result
from ...persistence.base import ZoneBoundaryRepository, await_result
from ..drawing.reducer import DrawingRules, validate_boundary
from ..geospatial import close_ring

logger = logging.getLogger(__name__)

T = TypeVar("T")

RenameListener = Callable[[str, str], Awaitable[None]]


class BoundaryStore:
    """CRUD over ``ZoneBoundary`` that enforces naming and closure before touching storage."""

    def __init__(
        self,
        repository: ZoneBoundaryRepository,
        *,
        timeout_seconds: float | None = None,
        cascade_renames: bool | None = None,
        rules: DrawingRules | None = None,
    ) -> None:
        self.repository = repository
        self.timeout_seconds = timeout_seconds or settings.repository_timeout_seconds
        self.cascade_renames = settings.cascade_renames if cascade_renames is None else cascade_renames
        self.rules = rules or DrawingRules.from_settings()
        self._rename_listeners: list[RenameListener] = []

    def add_rename_listener(self, listener: RenameListener) -> None:
        """Register a coroutine called with ``(old_name, new_name)`` after a cascaded rename."""

        self._rename_listeners.append(listener)

    async def _call(self, action: str, call: Awaitable[Result[T]]) -> T:
        return await await_result(action, call, self.timeout_seconds)

    # Queries

    async def list_active(self) -> list[ZoneBoundary]:
        return await self._call("load zone boundaries", self.repository.get_all_zone_boundaries())

    async def list_all(self) -> list[ZoneBoundary]:
        return await self._call(
            "load all zone boundaries",
            self.repository.get_all_zone_boundaries_including_inactive(),
        )

    async def get(self, boundary_id: str) -> ZoneBoundary:
        for boundary in await self.list_all():
            if boundary.id == boundary_id:
                return boundary
        raise NotFoundError(f"Boundary not found: {boundary_id}")

    async def find_by_name(self, name: str) -> Optional[ZoneBoundary]:
        wanted = canonical_name(name)
        for boundary in await self.list_active():
            if canonical_name(boundary.name) == wanted:
                return boundary
        return None

    async def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool:
        return await self._call(
            "check boundary name",
            self.repository.boundary_name_exists(canonical_name(name), exclude_id),
        )

    async def _ensure_unique(self, name: str, exclude_id: Optional[str] = None) -> None:
        if await self.name_exists(name, exclude_id):
            raise ValidationError(f"A boundary with the name '{name}' already exists")

    # Commands

    async def create(self, name: str, points: Sequence[BoundaryPoint]) -> ZoneBoundary:
        canonical = validate_boundary(name, points, self.rules)
        return await self.add(ZoneBoundary(name=canonical, points=close_ring(points)))

    async def add(self, boundary: ZoneBoundary) -> ZoneBoundary:
        """Persist a boundary produced by a finished drawing."""

        boundary = dataclasses.replace(
            boundary,
            name=validate_boundary(boundary.name, boundary.points, self.rules),
            points=close_ring(boundary.points),
        )
        await self._ensure_unique(boundary.name)
        stored = await self._call("save boundary", self.repository.add_zone_boundary(boundary))
        logger.info("Created boundary %s (%s) with %d points", stored.name, stored.id, len(stored.points))
        return stored

    async def update(
        self,
        boundary_id: str,
        name: str,
        points: Sequence[BoundaryPoint] | None = None,
    ) -> ZoneBoundary:
        current = await self.get(boundary_id)
        new_points = current.points if points is None else points
        canonical = validate_boundary(name, new_points, self.rules)
        updated = dataclasses.replace(
            current,
            name=canonical,
            points=close_ring(new_points),
            last_updated=now_millis(),
        )
        return await self._store_update(current, updated)

    async def save_edit(self, boundary: ZoneBoundary) -> ZoneBoundary:
        """Persist an edited boundary coming back from the drawing workflow."""

        return await self.update(boundary.id, boundary.name, boundary.points)

    async def rename(self, boundary_id: str, name: str) -> ZoneBoundary:
        return await self.update(boundary_id, name)

    async def _store_update(self, current: ZoneBoundary, updated: ZoneBoundary) -> ZoneBoundary:
        await self._ensure_unique(updated.name, exclude_id=current.id)
        await self._call("update boundary", self.repository.update_zone_boundary(updated))
        logger.info("Updated boundary %s (%s)", updated.name, updated.id)

        if current.name != updated.name and self.cascade_renames:
            await self._cascade_rename(current.name, updated.name, exclude_id=current.id)
        return updated

    async def save(self, boundary: ZoneBoundary) -> ZoneBoundary:
        """Write a full record as-is; used for fare and compatibility edits."""

        if not boundary.id:
            raise NotFoundError("Cannot save a boundary without an id")
        saved = dataclasses.replace(boundary, last_updated=now_millis())
        await self._call("update boundary", self.repository.update_zone_boundary(saved))
        return saved

    async def soft_delete(self, boundary_id: str) -> None:
        boundary = await self.get(boundary_id)
        await self._call("delete boundary", self.repository.delete_zone_boundary(boundary_id))
        logger.info("Deactivated boundary %s (%s)", boundary.name, boundary_id)

    async def reactivate(self, boundary_id: str) -> ZoneBoundary:
        boundary = await self.get(boundary_id)
        await self._ensure_unique(boundary.name, exclude_id=boundary.id)
        await self._call("reactivate boundary", self.repository.reactivate_zone_boundary(boundary_id))
        logger.info("Reactivated boundary %s (%s)", boundary.name, boundary_id)
        return dataclasses.replace(boundary, is_active=True)

    async def _cascade_rename(self, old_name: str, new_name: str, *, exclude_id: str) -> None:
        old_key = canonical_name(old_name)
        touched = 0
        for other in await self.list_all():
            if other.id == exclude_id:
                continue
            fares = {
                (new_name if canonical_name(key) == old_key else key): fare
                for key, fare in other.boundary_fares.items()
            }
            compatible = [
                new_name if canonical_name(name) == old_key else name for name in other.compatible_boundaries
            ]
            if fares == other.boundary_fares and compatible == other.compatible_boundaries:
                continue
            await self.save(dataclasses.replace(other, boundary_fares=fares, compatible_boundaries=compatible))
            touched += 1

        for listener in self._rename_listeners:
            await listener(old_key, new_name)
        logger.info("Renamed references %s -> %s on %d boundaries", old_key, new_name, touched)
