"""Pure transition function for the boundary drawing workflow.

``reduce(state, command)`` returns the next state and the effects the caller
must run. It performs no I/O; invalid commands raise and leave the (immutable)
input state untouched.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Sequence

from ...config import settings
from ...errors import InvalidStateError, NotFoundError, ValidationError
from ...models.domain import BoundaryPoint, ZoneBoundary, canonical_name, now_millis
from ..geospatial import (
    close_ring,
    distinct_vertex_count,
    is_simple_ring,
    nearest_point_index,
    open_ring,
    optimal_insertion_index,
)
from .state import (
    AddPoint,
    Cancel,
    ClearPoints,
    Command,
    DeselectPoint,
    DismissError,
    DragPoint,
    DrawingMode,
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


@dataclass(frozen=True, slots=True)
class DrawingRules:
    hit_threshold: float = 0.0005
    min_vertices: int = 3
    strict_simple: bool = False

    @classmethod
    def from_settings(cls) -> "DrawingRules":
        return cls(
            hit_threshold=settings.hit_test_threshold_degrees,
            min_vertices=settings.min_boundary_vertices,
            strict_simple=settings.strict_simple_polygons,
        )


Transition = tuple[DrawingState, list[Effect]]


def insert_point(points: Sequence[BoundaryPoint], new: BoundaryPoint) -> tuple[BoundaryPoint, ...]:
    """Place ``new`` into the buffer: append for the first two, greedy insertion afterwards."""

    if len(points) < 2:
        return (*points, new)
    index = optimal_insertion_index(points, new)
    return (*points[:index], new, *points[index:])


def validate_boundary(name: str, points: Sequence[BoundaryPoint], rules: DrawingRules) -> str:
    """Check a candidate boundary and return its canonical name."""

    if distinct_vertex_count(points) < rules.min_vertices:
        raise ValidationError(f"A boundary must have at least {rules.min_vertices} points")
    if not name or not name.strip():
        raise ValidationError("Please enter a boundary name")
    if rules.strict_simple and not is_simple_ring(points):
        raise ValidationError("Boundary edges cross each other; move or remove a point")
    return canonical_name(name)


def _require_drawing(state: DrawingState, action: str) -> None:
    if not state.is_drawing:
        raise InvalidStateError(f"Cannot {action} while not drawing a boundary")


def _require_index(state: DrawingState, index: int) -> None:
    if not 0 <= index < len(state.points):
        raise NotFoundError(f"Boundary point {index} does not exist ({len(state.points)} points)")


def _replace_point(state: DrawingState, index: int, latitude: float, longitude: float) -> tuple[BoundaryPoint, ...]:
    points = list(state.points)
    points[index] = BoundaryPoint(latitude, longitude)
    return tuple(points)


def _add(state: DrawingState, latitude: float, longitude: float) -> DrawingState:
    points = insert_point(state.points, BoundaryPoint(latitude, longitude))
    logger.debug("Added boundary point (%s, %s); total %d", latitude, longitude, len(points))
    return dataclasses.replace(state, points=points)


def _finish(state: DrawingState, name: str, rules: DrawingRules) -> Transition:
    _require_drawing(state, "finish")
    canonical = validate_boundary(name, state.points, rules)
    closed = close_ring(state.points)

    if state.editing is not None:
        boundary = dataclasses.replace(
            state.editing,
            name=canonical,
            points=closed,
            boundary_fares=dict(state.editing.boundary_fares),
            compatible_boundaries=list(state.editing.compatible_boundaries),
            last_updated=now_millis(),
        )
    else:
        boundary = ZoneBoundary(name=canonical, points=closed)

    resume = dataclasses.replace(state, error_message=None)
    logger.debug("Finished boundary %s with %d points", canonical, len(closed))
    return DrawingState(), [PersistBoundary(boundary=boundary, editing_id=state.editing_id, resume=resume)]


def reduce(state: DrawingState, command: Command, rules: DrawingRules | None = None) -> Transition:
    """Apply ``command`` to ``state``."""

    rules = rules or DrawingRules()

    match command:
        case StartDrawing():
            return DrawingState(mode=DrawingMode.DRAWING), []

        case StartEditing(boundary=boundary):
            points = tuple(open_ring(boundary.points))
            logger.debug("Editing boundary %s with %d unique points", boundary.name, len(points))
            return DrawingState(mode=DrawingMode.DRAWING, points=points, editing=boundary), []

        case AddPoint(latitude=lat, longitude=lng):
            _require_drawing(state, "add a point")
            return _add(state, lat, lng), []

        case SelectPoint(index=index):
            _require_drawing(state, "select a point")
            _require_index(state, index)
            return dataclasses.replace(state, selected_index=index), []

        case DeselectPoint():
            return dataclasses.replace(state, selected_index=None), []

        case MoveSelectedPoint(latitude=lat, longitude=lng):
            _require_drawing(state, "move a point")
            if state.selected_index is None:
                return _add(state, lat, lng), []
            _require_index(state, state.selected_index)
            points = _replace_point(state, state.selected_index, lat, lng)
            return dataclasses.replace(state, points=points), []

        case TapMap(latitude=lat, longitude=lng):
            _require_drawing(state, "edit points")
            if state.selected_index is not None:
                return reduce(state, MoveSelectedPoint(lat, lng), rules)
            hit = nearest_point_index(state.points, lat, lng, rules.hit_threshold)
            if hit is not None:
                return dataclasses.replace(state, selected_index=hit), []
            return _add(state, lat, lng), []

        case DragPoint(index=index, latitude=lat, longitude=lng):
            _require_drawing(state, "drag a point")
            _require_index(state, index)
            points = _replace_point(state, index, lat, lng)
            return dataclasses.replace(state, points=points, selected_index=index), []

        case EndDrag():
            return dataclasses.replace(state, selected_index=None), []

        case RemovePoint(index=index):
            _require_drawing(state, "remove a point")
            _require_index(state, index)
            points = state.points[:index] + state.points[index + 1:]
            selected = state.selected_index
            if selected == index:
                selected = None
            elif selected is not None and selected > index:
                selected -= 1
            return dataclasses.replace(state, points=points, selected_index=selected), []

        case ClearPoints():
            _require_drawing(state, "clear points")
            return dataclasses.replace(state, points=(), selected_index=None), []

        case Finish(name=name):
            return _finish(state, name, rules)

        case SaveSucceeded():
            return dataclasses.replace(state, error_message=None), []

        case SaveFailed(message=message, resume=resume):
            return dataclasses.replace(resume, error_message=message), []

        case Cancel():
            return DrawingState(), []

        case DismissError():
            return dataclasses.replace(state, error_message=None), []

    raise TypeError(f"Unsupported drawing command: {command!r}")
