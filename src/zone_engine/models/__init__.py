"""Domain models."""

from .domain import (
    BoundaryFareBatch,
    BoundaryFareRule,
    BoundaryPoint,
    ServiceDestination,
    ZoneBoundary,
    canonical_name,
)
from .result import Result

__all__ = [
    "BoundaryFareBatch",
    "BoundaryFareRule",
    "BoundaryPoint",
    "Result",
    "ServiceDestination",
    "ZoneBoundary",
    "canonical_name",
]
