"""Admin-console orchestration: drawing workflow, boundary list and their storage round-trips.

Every public coroutine converts engine failures into ``error_message`` on the
console state instead of raising, so a failed save never loses the drawing
buffer.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ...errors import InvalidStateError, NotFoundError, ZoneEngineError
from ...models.domain import BoundaryPoint, ZoneBoundary
from ..compatibility.service import CompatibilityService
from ..drawing.machine import BoundaryDrawingMachine
from ..drawing.state import PersistBoundary
from ..fares.service import FareResolutionService
from .store import BoundaryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConsoleState:
    is_loading: bool = False
    is_saving: bool = False
    boundaries: tuple[ZoneBoundary, ...] = ()
    include_inactive: bool = False
    error_message: Optional[str] = None
    success_message: Optional[str] = None


@dataclass(slots=True)
class ZoneBoundaryConsole:
    store: BoundaryStore
    fares: FareResolutionService
    compatibility: CompatibilityService
    machine: BoundaryDrawingMachine = field(default_factory=BoundaryDrawingMachine)
    state: ConsoleState = field(default_factory=ConsoleState)

    def _set(self, **changes) -> None:
        self.state = dataclasses.replace(self.state, **changes)

    def _fail(self, action: str, exc: ZoneEngineError) -> None:
        logger.warning("Failed to %s: %s", action, exc)
        self._set(is_loading=False, error_message=str(exc), success_message=None)

    def _find_loaded(self, boundary_id: str) -> ZoneBoundary:
        for boundary in self.state.boundaries:
            if boundary.id == boundary_id:
                return boundary
        raise NotFoundError("Boundary not found")

    def dismiss_messages(self) -> None:
        self._set(error_message=None, success_message=None)
        self.machine.dismiss_error()

    # Map surface

    @property
    def is_drawing(self) -> bool:
        return self.machine.is_drawing

    @property
    def points(self) -> list[BoundaryPoint]:
        return self.machine.points

    @property
    def selected_index(self) -> Optional[int]:
        return self.machine.selected_index

    def on_point_tapped(self, latitude: float, longitude: float) -> None:
        self._guard("edit points", self.machine.on_point_tapped, latitude, longitude)

    def on_point_dragged(self, index: int, latitude: float, longitude: float) -> None:
        self._guard("drag point", self.machine.on_point_dragged, index, latitude, longitude)

    def on_point_drag_ended(self) -> None:
        self.machine.on_point_drag_ended()

    def _guard(self, action: str, operation, *args) -> bool:
        try:
            operation(*args)
        except ZoneEngineError as exc:
            self._fail(action, exc)
            return False
        return True

    # Drawing lifecycle

    def _require_idle_save(self) -> None:
        if self.state.is_saving:
            raise InvalidStateError("A boundary save is still in progress")

    def start_drawing(self) -> None:
        try:
            self._require_idle_save()
        except InvalidStateError as exc:
            self._fail("start drawing", exc)
            return
        self._guard("start drawing", self.machine.start_drawing)

    def start_editing(self, boundary_id: str) -> None:
        try:
            self._require_idle_save()
            boundary = self._find_loaded(boundary_id)
        except ZoneEngineError as exc:
            self._fail("edit boundary", exc)
            return
        self._guard("edit boundary", self.machine.start_editing, boundary)

    def cancel_drawing(self) -> None:
        self.machine.cancel()

    async def finish_drawing(self, name: str) -> Optional[ZoneBoundary]:
        """Close the drawing and persist it; on failure the buffer is restored for retry."""

        if not self._guard("finish boundary", self.machine.finish, name):
            return None

        stored: Optional[ZoneBoundary] = None
        for effect in self.machine.take_effects():
            if isinstance(effect, PersistBoundary):
                stored = await self._persist(effect)
        return stored

    async def _persist(self, effect: PersistBoundary) -> Optional[ZoneBoundary]:
        self._set(is_loading=True, is_saving=True, error_message=None)
        try:
            if effect.editing_id is None:
                stored = await self.store.add(effect.boundary)
            else:
                stored = await self.store.save_edit(dataclasses.replace(effect.boundary, id=effect.editing_id))
        except ZoneEngineError as exc:
            self._set(is_saving=False)
            self.machine.save_failed(str(exc), effect.resume)
            self._fail("save boundary", exc)
            return None

        self._set(is_saving=False)
        self.machine.save_succeeded(stored)
        self.fares.locator.clear_cache()
        await self.refresh(include_inactive=self.state.include_inactive)
        self._set(success_message=f"Boundary {stored.name} saved")
        return stored

    # Boundary list

    async def refresh(self, include_inactive: bool = False) -> None:
        self._set(is_loading=True, error_message=None)
        try:
            if include_inactive:
                boundaries = await self.store.list_all()
            else:
                boundaries = await self.store.list_active()
        except ZoneEngineError as exc:
            self._fail("load zone boundaries", exc)
            return
        self._set(is_loading=False, boundaries=tuple(boundaries), include_inactive=include_inactive)
        logger.debug("Loaded %d zone boundaries", len(boundaries))

    async def _mutate(self, action: str, success: str, operation) -> bool:
        self._set(is_loading=True, error_message=None, success_message=None)
        try:
            await operation()
        except ZoneEngineError as exc:
            self._fail(action, exc)
            return False
        self.fares.locator.clear_cache()
        await self.refresh(include_inactive=self.state.include_inactive)
        if self.state.error_message is None:
            self._set(success_message=success)
        return True

    async def delete_boundary(self, boundary_id: str) -> bool:
        async def operation() -> None:
            self._find_loaded(boundary_id)
            await self.store.soft_delete(boundary_id)

        return await self._mutate("delete boundary", "Boundary deleted successfully", operation)

    async def reactivate_boundary(self, boundary_id: str) -> bool:
        async def operation() -> None:
            self._find_loaded(boundary_id)
            await self.store.reactivate(boundary_id)

        return await self._mutate("reactivate boundary", "Boundary reactivated successfully", operation)

    async def rename_boundary(self, boundary_id: str, name: str) -> bool:
        async def operation() -> None:
            self._find_loaded(boundary_id)
            await self.store.rename(boundary_id, name)

        return await self._mutate("rename boundary", "Boundary renamed successfully", operation)

    async def update_boundary_fares(self, boundary_id: str, fares: Mapping[str, float]) -> bool:
        async def operation() -> None:
            self._find_loaded(boundary_id)
            await self.fares.set_boundary_fares(boundary_id, fares)

        return await self._mutate("update boundary fares", "Boundary fares updated successfully", operation)

    async def update_compatible_boundaries(self, boundary_id: str, names: Iterable[str]) -> bool:
        async def operation() -> None:
            self._find_loaded(boundary_id)
            await self.compatibility.set_compatible(boundary_id, names)

        return await self._mutate(
            "update compatibility settings",
            "Compatibility settings updated successfully",
            operation,
        )

    async def set_destination_fares(self, destination: str, fares: Mapping[str, float]) -> bool:
        async def operation() -> None:
            await self.fares.set_fares_for_destination(destination, fares)

        return await self._mutate("set boundary fares", f"Boundary fares saved for {destination}", operation)
