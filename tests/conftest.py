from __future__ import annotations

import pytest

from zone_engine.persistence.memory import InMemoryFareBatchRepository, InMemoryZoneBoundaryRepository
from zone_engine.services.boundaries.store import BoundaryStore
from zone_engine.services.compatibility.service import CompatibilityService
from zone_engine.services.drawing.reducer import DrawingRules
from zone_engine.services.fares.service import FareResolutionService


@pytest.fixture
def rules() -> DrawingRules:
    return DrawingRules(hit_threshold=0.0005, min_vertices=3, strict_simple=False)


@pytest.fixture
def boundary_repository() -> InMemoryZoneBoundaryRepository:
    return InMemoryZoneBoundaryRepository()


@pytest.fixture
def fare_repository() -> InMemoryFareBatchRepository:
    return InMemoryFareBatchRepository()


@pytest.fixture
def store(boundary_repository, rules) -> BoundaryStore:
    return BoundaryStore(boundary_repository, timeout_seconds=1.0, cascade_renames=True, rules=rules)


@pytest.fixture
def fares(store, fare_repository) -> FareResolutionService:
    return FareResolutionService(store, fare_repository, timeout_seconds=1.0)


@pytest.fixture
def compatibility(store) -> CompatibilityService:
    return CompatibilityService(store)
