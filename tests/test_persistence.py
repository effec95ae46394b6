import pytest

from zone_engine.config import Settings
from zone_engine.errors import PersistenceError
from zone_engine.models.domain import BoundaryFareBatch, BoundaryFareRule, BoundaryPoint, ZoneBoundary
from zone_engine.models.result import Result
from zone_engine.persistence.memory import InMemoryFareBatchRepository, InMemoryZoneBoundaryRepository
from zone_engine.persistence.supabase_repository import (
    SupabaseZoneBoundaryRepository,
    batch_to_row,
    boundary_to_row,
    row_to_batch,
    row_to_boundary,
)


class ExplodingClient:
    def table(self, name):
        raise ConnectionError(f"cannot reach {name}")


def test_boundary_row_mapping_preserves_fields() -> None:
    boundary = ZoneBoundary(
        id="b1",
        name="POBLACION",
        points=[BoundaryPoint(10.0, 125.5), BoundaryPoint(10.1, 125.5), BoundaryPoint(10.0, 125.5)],
        boundary_fares={"SAN JOSE": 30.0},
        compatible_boundaries=["SAN JOSE"],
        created_at=1,
        last_updated=2,
    )

    row = boundary_to_row(boundary)

    assert row["points"][0] == {"latitude": 10.0, "longitude": 125.5}
    assert row_to_boundary(row) == boundary


def test_row_to_boundary_applies_defaults() -> None:
    boundary = row_to_boundary({"id": 7, "name": "LUNA"})

    assert boundary.id == "7"
    assert boundary.points == []
    assert boundary.fill_color == "#FF9800"
    assert boundary.stroke_color == "#F57C00"
    assert boundary.stroke_width == 2.0
    assert boundary.is_active


def test_batch_row_mapping_preserves_rules() -> None:
    batch = BoundaryFareBatch(
        id="batch_1",
        name="Mall Fares",
        rules=[BoundaryFareRule("POBLACION", "Mall", 50.0, id="r1", created_at=1, last_updated=1)],
        created_at=1,
        last_updated=1,
    )

    assert row_to_batch(batch_to_row(batch)) == batch


async def test_supabase_errors_become_failed_results() -> None:
    repository = SupabaseZoneBoundaryRepository(ExplodingClient(), table="zone_boundaries")

    result = await repository.get_all_zone_boundaries()

    assert not result.ok
    assert "cannot reach zone_boundaries" in result.message
    with pytest.raises(PersistenceError):
        result.unwrap()


async def test_memory_repository_copies_records() -> None:
    repository = InMemoryZoneBoundaryRepository()
    stored = (await repository.add_zone_boundary(ZoneBoundary(name="A", points=[]))).value

    stored.name = "CHANGED"

    (loaded,) = (await repository.get_all_zone_boundaries()).value
    assert loaded.name == "A"


async def test_memory_repository_reports_missing_records() -> None:
    boundaries = InMemoryZoneBoundaryRepository()
    batches = InMemoryFareBatchRepository()

    assert not (await boundaries.delete_zone_boundary("missing")).ok
    assert not (await boundaries.update_zone_boundary(ZoneBoundary(name="X", points=[], id="missing"))).ok
    assert not (await batches.delete_fare_batch("missing")).ok


async def test_memory_fare_repository_hides_inactive_rules() -> None:
    repository = InMemoryFareBatchRepository(
        [
            BoundaryFareBatch(
                name="Mall Fares",
                rules=[
                    BoundaryFareRule("A", "Mall", 50.0),
                    BoundaryFareRule("B", "Mall", 60.0, is_active=False),
                ],
            ),
            BoundaryFareBatch(name="Old Fares", is_active=False),
        ]
    )

    (batch,) = (await repository.get_all_fare_batches()).value
    assert [rule.from_boundary for rule in batch.rules] == ["A"]


def test_result_unwrap() -> None:
    assert Result.success(3).unwrap() == 3
    with pytest.raises(PersistenceError, match="boom"):
        Result.failure("boom").unwrap()


def test_settings_parse_origins_and_log_level(monkeypatch) -> None:
    monkeypatch.setenv("ZONE_FRONTEND_ALLOWED_ORIGINS", '["https://a.example", "https://b.example"]')
    monkeypatch.setenv("ZONE_LOG_LEVEL", "debug")
    monkeypatch.setenv("ZONE_STORAGE_BACKEND", "memory")

    configured = Settings()

    assert configured.frontend_allowed_origins == ("https://a.example", "https://b.example")
    assert configured.log_level == "DEBUG"
    assert configured.hit_test_threshold_degrees == 0.0005
