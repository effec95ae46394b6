"""Repository contracts and implementations."""

from .base import FareBatchRepository, ZoneBoundaryRepository
from .memory import InMemoryFareBatchRepository, InMemoryZoneBoundaryRepository

__all__ = [
    "FareBatchRepository",
    "InMemoryFareBatchRepository",
    "InMemoryZoneBoundaryRepository",
    "ZoneBoundaryRepository",
]
