"""Geospatial helper functions for boundary drawing and zone lookup."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LinearRing, Point, Polygon

from ..models.domain import BoundaryPoint

EARTH_RADIUS_M = 6_371_000.0


def distance(a: BoundaryPoint, b: BoundaryPoint) -> float:
    """Great-circle distance in metres using the Haversine formula."""

    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def planar_distance(a: BoundaryPoint, b: BoundaryPoint) -> float:
    """Euclidean distance in raw degrees. Hit-testing only, never perimeters."""

    return math.hypot(b.latitude - a.latitude, b.longitude - a.longitude)


def insertion_delta(prev: BoundaryPoint, new: BoundaryPoint, nxt: BoundaryPoint) -> float:
    """Perimeter growth caused by inserting ``new`` between ``prev`` and ``nxt``."""

    return distance(prev, new) + distance(new, nxt) - distance(prev, nxt)


def insertion_deltas(points: Sequence[BoundaryPoint], new: BoundaryPoint) -> list[float]:
    """Delta for every cyclic edge ``(points[i], points[(i + 1) % n])``."""

    count = len(points)
    return [insertion_delta(points[i], new, points[(i + 1) % count]) for i in range(count)]


def optimal_insertion_index(points: Sequence[BoundaryPoint], new: BoundaryPoint) -> int:
    """List index at which ``new`` should be inserted to minimise perimeter growth.

    Greedy and best-effort: keeps convex-ish shapes simple when vertices are
    tapped out of order, but gives no guarantee for concave outlines. Ties
    resolve to the earliest edge.
    """

    if len(points) < 2:
        return len(points)

    deltas = insertion_deltas(points, new)
    best_edge = 0
    best_delta = deltas[0]
    for edge, delta in enumerate(deltas[1:], start=1):
        if delta < best_delta:
            best_edge, best_delta = edge, delta
    return best_edge + 1


def nearest_point_index(
    points: Sequence[BoundaryPoint],
    latitude: float,
    longitude: float,
    threshold: float,
) -> int | None:
    """Index of the closest point if it lies strictly within ``threshold`` degrees."""

    if not points:
        return None
    probe = BoundaryPoint(latitude, longitude)
    nearest_index = min(range(len(points)), key=lambda idx: planar_distance(points[idx], probe))
    if planar_distance(points[nearest_index], probe) < threshold:
        return nearest_index
    return None


def close_ring(points: Sequence[BoundaryPoint]) -> list[BoundaryPoint]:
    ring = list(points)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def open_ring(points: Sequence[BoundaryPoint]) -> list[BoundaryPoint]:
    ring = list(points)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def distinct_vertex_count(points: Sequence[BoundaryPoint]) -> int:
    return len(set(open_ring(points)))


def perimeter(points: Sequence[BoundaryPoint]) -> float:
    """Closed-ring perimeter in metres."""

    ring = close_ring(points)
    return sum(distance(ring[i], ring[i + 1]) for i in range(len(ring) - 1))


def _lnglat(points: Sequence[BoundaryPoint]) -> list[tuple[float, float]]:
    return [(point.longitude, point.latitude) for point in open_ring(points)]


def is_simple_ring(points: Sequence[BoundaryPoint]) -> bool:
    """Return False when the closed ring crosses itself."""

    coords = _lnglat(points)
    if len(coords) < 3:
        return False
    return LinearRing(coords).is_simple


def point_in_ring(latitude: float, longitude: float, points: Sequence[BoundaryPoint]) -> bool:
    """Return True if the point is inside the polygon outlined by ``points``."""

    coords = _lnglat(points)
    if len(coords) < 3:
        return False
    return Polygon(coords).contains(Point(longitude, latitude))


def ring_area(points: Sequence[BoundaryPoint]) -> float:
    """Planar area in square degrees; only meaningful for ranking overlaps."""

    coords = _lnglat(points)
    if len(coords) < 3:
        return 0.0
    return Polygon(coords).area
