"""WKT and GeoJSON export of zone boundaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ...models.domain import ZoneBoundary
from ..geospatial import close_ring, ring_area


def boundary_to_wkt(boundary: ZoneBoundary) -> str:
    """Convert a boundary to a WKT POLYGON string.

    Args:
        boundary: Boundary with at least 3 points

    Returns:
        WKT POLYGON string (lon lat order, as WKT expects)
    """
    if len(boundary.vertices) < 3:
        raise ValueError("Polygon must have at least 3 coordinates")

    coord_pairs = [f"{p.longitude} {p.latitude}" for p in close_ring(boundary.points)]
    return f"POLYGON(({','.join(coord_pairs)}))"


def boundary_to_feature(boundary: ZoneBoundary) -> Dict[str, Any]:
    ring = close_ring(boundary.points)
    return {
        "type": "Feature",
        "id": boundary.id or None,
        "geometry": {
            "type": "Polygon",
            # GeoJSON positions are [lon, lat]
            "coordinates": [[[p.longitude, p.latitude] for p in ring]],
        },
        "properties": {
            "name": boundary.name,
            "is_active": boundary.is_active,
            "fill_color": boundary.fill_color,
            "stroke_color": boundary.stroke_color,
            "stroke_width": boundary.stroke_width,
            "boundary_fares": dict(boundary.boundary_fares),
            "compatible_boundaries": list(boundary.compatible_boundaries),
            "area_sq_degrees": ring_area(ring),
            "wkt": boundary_to_wkt(boundary),
        },
    }


def boundaries_to_feature_collection(boundaries: Iterable[ZoneBoundary]) -> Dict[str, Any]:
    """Build a FeatureCollection; boundaries with fewer than 3 vertices are skipped."""
    features: List[Dict[str, Any]] = []
    for boundary in boundaries:
        if len(boundary.vertices) < 3:
            continue
        features.append(boundary_to_feature(boundary))
    return {"type": "FeatureCollection", "features": features}


def save_feature_collection(collection: Dict[str, Any], output_path: Path) -> None:
    """Save a FeatureCollection as JSON.

    Args:
        collection: GeoJSON FeatureCollection
        output_path: Path to save JSON file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)
