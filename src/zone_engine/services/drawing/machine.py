"""Stateful wrapper around the drawing reducer used by the console and map surface."""

from __future__ import annotations

import logging
from typing import Optional

from ...models.domain import BoundaryPoint, ZoneBoundary
from ..geospatial import nearest_point_index
from .reducer import DrawingRules, reduce
from .state import (
    AddPoint,
    Cancel,
    ClearPoints,
    Command,
    DeselectPoint,
    DismissError,
    DragPoint,
    DrawingState,
    Effect,
    EndDrag,
    Finish,
    MoveSelectedPoint,
    PersistBoundary,
    RemovePoint,
    SaveFailed,
    SaveSucceeded,
    SelectPoint,
    StartDrawing,
    StartEditing,
    TapMap,
)

logger = logging.getLogger(__name__)


class BoundaryDrawingMachine:
    """Holds the current ``DrawingState`` and replaces it wholesale on every command."""

    def __init__(self, rules: DrawingRules | None = None, state: DrawingState | None = None) -> None:
        self.rules = rules or DrawingRules.from_settings()
        self._state = state or DrawingState()
        self._pending: list[Effect] = []

    @property
    def state(self) -> DrawingState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state.is_drawing

    @property
    def points(self) -> list[BoundaryPoint]:
        return list(self._state.points)

    @property
    def selected_index(self) -> Optional[int]:
        return self._state.selected_index

    def dispatch(self, command: Command) -> list[Effect]:
        next_state, effects = reduce(self._state, command, self.rules)
        self._state = next_state
        self._pending.extend(effects)
        return effects

    def take_effects(self) -> list[Effect]:
        """Drain effects produced since the last call."""

        effects, self._pending = self._pending, []
        return effects

    # Drawing operations

    def start_drawing(self) -> None:
        self.dispatch(StartDrawing())
        logger.debug("Started drawing new boundary")

    def start_editing(self, boundary: ZoneBoundary) -> None:
        self.dispatch(StartEditing(boundary))

    def add_point(self, latitude: float, longitude: float) -> None:
        self.dispatch(AddPoint(latitude, longitude))

    def select_point(self, index: int) -> None:
        self.dispatch(SelectPoint(index))

    def deselect_point(self) -> None:
        self.dispatch(DeselectPoint())

    def move_selected_point(self, latitude: float, longitude: float) -> None:
        self.dispatch(MoveSelectedPoint(latitude, longitude))

    def remove_point(self, index: int) -> None:
        self.dispatch(RemovePoint(index))

    def clear_points(self) -> None:
        self.dispatch(ClearPoints())

    def nearest_point_within_threshold(self, latitude: float, longitude: float) -> Optional[int]:
        return nearest_point_index(self._state.points, latitude, longitude, self.rules.hit_threshold)

    def finish(self, name: str) -> ZoneBoundary:
        """Validate and close the drawing; raises ``ValidationError`` with the buffer intact.

        The machine is IDLE afterwards. ``save_failed`` with the effect's
        ``resume`` snapshot puts the buffer back if the write is rejected.
        """

        effects = self.dispatch(Finish(name))
        persist = next(effect for effect in effects if isinstance(effect, PersistBoundary))
        return persist.boundary

    def cancel(self) -> None:
        self.dispatch(Cancel())
        self._pending.clear()
        logger.debug("Cancelled drawing boundary")

    def save_succeeded(self, boundary: ZoneBoundary) -> None:
        self.dispatch(SaveSucceeded(boundary))

    def save_failed(self, message: str, resume: DrawingState) -> None:
        self.dispatch(SaveFailed(message, resume))

    def dismiss_error(self) -> None:
        self.dispatch(DismissError())

    # Map surface callbacks

    def on_point_tapped(self, latitude: float, longitude: float) -> None:
        self.dispatch(TapMap(latitude, longitude))

    def on_point_dragged(self, index: int, latitude: float, longitude: float) -> None:
        self.dispatch(DragPoint(index, latitude, longitude))

    def on_point_drag_ended(self) -> None:
        self.dispatch(EndDrag())
