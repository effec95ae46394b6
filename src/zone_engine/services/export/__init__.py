"""Export services."""

from .geojson import (
    boundaries_to_feature_collection,
    boundary_to_wkt,
    save_feature_collection,
)

__all__ = [
    "boundaries_to_feature_collection",
    "boundary_to_wkt",
    "save_feature_collection",
]
