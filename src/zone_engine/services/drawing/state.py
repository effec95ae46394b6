"""Immutable drawing state plus the commands and effects that drive it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ...models.domain import BoundaryPoint, ZoneBoundary


class DrawingMode(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"


@dataclass(frozen=True, slots=True)
class DrawingState:
    mode: DrawingMode = DrawingMode.IDLE
    points: tuple[BoundaryPoint, ...] = ()
    selected_index: Optional[int] = None
    editing: Optional[ZoneBoundary] = None
    error_message: Optional[str] = None

    @property
    def is_drawing(self) -> bool:
        return self.mode is DrawingMode.DRAWING

    @property
    def editing_id(self) -> Optional[str]:
        return self.editing.id if self.editing is not None else None


# Commands


@dataclass(frozen=True, slots=True)
class StartDrawing:
    pass


@dataclass(frozen=True, slots=True)
class StartEditing:
    boundary: ZoneBoundary


@dataclass(frozen=True, slots=True)
class AddPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class SelectPoint:
    index: int


@dataclass(frozen=True, slots=True)
class DeselectPoint:
    pass


@dataclass(frozen=True, slots=True)
class MoveSelectedPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class TapMap:
    """Raw tap from the map surface; resolved into move, select or add."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class DragPoint:
    index: int
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class EndDrag:
    pass


@dataclass(frozen=True, slots=True)
class RemovePoint:
    index: int


@dataclass(frozen=True, slots=True)
class ClearPoints:
    pass


@dataclass(frozen=True, slots=True)
class Finish:
    name: str


@dataclass(frozen=True, slots=True)
class SaveSucceeded:
    boundary: ZoneBoundary


@dataclass(frozen=True, slots=True)
class SaveFailed:
    message: str
    resume: DrawingState


@dataclass(frozen=True, slots=True)
class Cancel:
    pass


@dataclass(frozen=True, slots=True)
class DismissError:
    pass


Command = Union[
    StartDrawing,
    StartEditing,
    AddPoint,
    SelectPoint,
    DeselectPoint,
    MoveSelectedPoint,
    TapMap,
    DragPoint,
    EndDrag,
    RemovePoint,
    ClearPoints,
    Finish,
    SaveSucceeded,
    SaveFailed,
    Cancel,
    DismissError,
]


# Effects


@dataclass(frozen=True, slots=True)
class PersistBoundary:
    """Ask the caller to store ``boundary``.

    ``editing_id`` is None for a new boundary. ``resume`` is the state to
    restore through ``SaveFailed`` if the repository rejects the write.
    """

    boundary: ZoneBoundary
    editing_id: Optional[str]
    resume: DrawingState


Effect = PersistBoundary
