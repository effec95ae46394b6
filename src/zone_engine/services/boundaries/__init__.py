"""Boundary storage and lookup.

The admin console lives in ``services.boundaries.console``; it depends on the
fare service, which in turn imports this package.
"""

from .locator import ZoneLocator
from .store import BoundaryStore

__all__ = ["BoundaryStore", "ZoneLocator"]
