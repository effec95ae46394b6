import json
from pathlib import Path

import pytest

from zone_engine.models.domain import ZoneBoundary, points_from_pairs
from zone_engine.services.export.geojson import (
    boundaries_to_feature_collection,
    boundary_to_wkt,
    save_feature_collection,
)
from zone_engine.services.seed import load_legacy_boundaries, seed_boundaries


def test_bundled_legacy_boundaries_load() -> None:
    definitions = load_legacy_boundaries()

    assert "POBLACION" in definitions
    assert "MATINGBE" in definitions
    assert all(len(pairs) >= 4 for pairs in definitions.values())


async def test_seed_creates_boundaries_once(store) -> None:
    definitions = {
        "Matingbe": [(10.0004, 125.5714), (9.9934, 125.5765), (9.9939, 125.5901), (9.9988, 125.5904)],
        "Broken": [(10.0, 125.0), (10.0, 125.1)],
    }

    assert await seed_boundaries(store, definitions) == 1
    assert [b.name for b in await store.list_active()] == ["MATINGBE"]
    assert await seed_boundaries(store, definitions) == 0


async def test_seed_bundled_file(store) -> None:
    created = await seed_boundaries(store)

    assert created == len(load_legacy_boundaries())
    assert all(b.is_closed for b in await store.list_active())


def test_load_legacy_boundaries_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_legacy_boundaries(tmp_path / "absent.json")


def test_boundary_to_wkt_uses_lon_lat_and_closes_ring() -> None:
    boundary = ZoneBoundary(name="TRI", points=points_from_pairs([(1, 10), (2, 10), (2, 11)]))

    assert boundary_to_wkt(boundary) == "POLYGON((10.0 1.0,10.0 2.0,11.0 2.0,10.0 1.0))"


def test_boundary_to_wkt_rejects_degenerate_boundary() -> None:
    with pytest.raises(ValueError):
        boundary_to_wkt(ZoneBoundary(name="LINE", points=points_from_pairs([(1, 10), (2, 10)])))


def test_feature_collection_skips_degenerate_and_saves(tmp_path: Path) -> None:
    good = ZoneBoundary(name="TRI", points=points_from_pairs([(1, 10), (2, 10), (2, 11)]), id="zb_1")
    bad = ZoneBoundary(name="LINE", points=points_from_pairs([(1, 10), (2, 10)]))

    collection = boundaries_to_feature_collection([good, bad])
    assert [f["properties"]["name"] for f in collection["features"]] == ["TRI"]
    assert collection["features"][0]["id"] == "zb_1"

    output = tmp_path / "exports" / "zones.geojson"
    save_feature_collection(collection, output)
    assert json.loads(output.read_text(encoding="utf-8")) == collection
