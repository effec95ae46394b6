"""Domain models for zone boundaries, destinations and fare batches."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Sequence

DEFAULT_FILL_COLOR = "#FF9800"
DEFAULT_STROKE_COLOR = "#F57C00"
DEFAULT_STROKE_WIDTH = 2.0


def now_millis() -> int:
    return int(time.time() * 1000)


def canonical_name(name: str) -> str:
    """Boundary names compare case-insensitively and are stored upper-cased."""

    return name.strip().upper()


@dataclass(frozen=True, slots=True)
class BoundaryPoint:
    """A single polygon vertex."""

    latitude: float
    longitude: float


@dataclass(slots=True)
class ZoneBoundary:
    """A named, closed polygon delineating a fare/pooling zone.

    ``boundary_fares`` and ``compatible_boundaries`` reference other
    boundaries by their canonical name.
    """

    name: str
    points: list[BoundaryPoint]
    id: str = ""
    fill_color: str = DEFAULT_FILL_COLOR
    stroke_color: str = DEFAULT_STROKE_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    is_active: bool = True
    boundary_fares: dict[str, float] = field(default_factory=dict)
    compatible_boundaries: list[str] = field(default_factory=list)
    created_at: int = field(default_factory=now_millis)
    last_updated: int = field(default_factory=now_millis)

    @property
    def is_closed(self) -> bool:
        return len(self.points) > 1 and self.points[0] == self.points[-1]

    @property
    def vertices(self) -> list[BoundaryPoint]:
        """Points without the duplicated closing vertex."""

        if self.is_closed:
            return list(self.points[:-1])
        return list(self.points)


@dataclass(slots=True)
class ServiceDestination:
    """A named landmark that destination fares attach to by name."""

    id: str
    name: str
    latitude: float
    longitude: float
    marker_color: str = "red"


@dataclass(slots=True)
class BoundaryFareRule:
    from_boundary: str
    to_location: str
    fare: float
    id: str = ""
    is_active: bool = True
    created_at: int = field(default_factory=now_millis)
    last_updated: int = field(default_factory=now_millis)


@dataclass(slots=True)
class BoundaryFareBatch:
    """A destination's entire fare table, replaced wholesale on edit."""

    name: str
    rules: list[BoundaryFareRule] = field(default_factory=list)
    id: str = ""
    description: str = ""
    is_active: bool = True
    created_at: int = field(default_factory=now_millis)
    last_updated: int = field(default_factory=now_millis)

    def targets(self, destination: str) -> bool:
        """True when this batch holds the fare table for ``destination``."""

        wanted = destination.strip().casefold()
        if self.name.strip().casefold() == f"{wanted} fares":
            return True
        return bool(self.rules) and all(
            rule.to_location.strip().casefold() == wanted for rule in self.rules
        )


def points_from_pairs(pairs: Sequence[Sequence[float]]) -> list[BoundaryPoint]:
    return [BoundaryPoint(float(lat), float(lng)) for lat, lng in pairs]
