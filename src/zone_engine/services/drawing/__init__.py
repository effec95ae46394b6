"""Boundary drawing workflow."""

from .machine import BoundaryDrawingMachine
from .reducer import DrawingRules, insert_point, reduce, validate_boundary
from .state import DrawingMode, DrawingState, PersistBoundary

__all__ = [
    "BoundaryDrawingMachine",
    "DrawingMode",
    "DrawingRules",
    "DrawingState",
    "PersistBoundary",
    "insert_point",
    "reduce",
    "validate_boundary",
]
