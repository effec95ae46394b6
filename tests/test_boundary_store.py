import asyncio

import pytest

from zone_engine.errors import NotFoundError, PersistenceError, ValidationError
from zone_engine.models.domain import BoundaryPoint, ZoneBoundary, points_from_pairs
from zone_engine.models.result import Result
from zone_engine.persistence.memory import InMemoryZoneBoundaryRepository
from zone_engine.services.boundaries.store import BoundaryStore

TRIANGLE = points_from_pairs([(10.00, 125.50), (10.01, 125.50), (10.01, 125.51)])
OTHER = points_from_pairs([(10.10, 125.60), (10.11, 125.60), (10.11, 125.61)])


class FailingRepository(InMemoryZoneBoundaryRepository):
    async def add_zone_boundary(self, boundary):
        return Result.failure("Firestore unavailable")


class SlowRepository(InMemoryZoneBoundaryRepository):
    async def get_all_zone_boundaries(self):
        await asyncio.sleep(1)
        return await super().get_all_zone_boundaries()


async def test_create_closes_ring_and_round_trips(store) -> None:
    created = await store.create("Poblacion", TRIANGLE)

    assert created.id
    assert created.name == "POBLACION"
    assert created.points[0] == created.points[-1]
    assert len(created.points) == 4

    loaded = await store.get(created.id)
    assert loaded.name == created.name
    assert loaded.points == created.points


async def test_add_closes_ring_of_unclosed_boundary(store) -> None:
    stored = await store.add(ZoneBoundary(name="matingbe", points=list(TRIANGLE)))

    assert stored.is_closed
    assert stored.name == "MATINGBE"


async def test_name_uniqueness_is_case_insensitive(store) -> None:
    first = await store.create("Zone A", TRIANGLE)

    assert await store.name_exists("zone a")
    assert not await store.name_exists("zone a", exclude_id=first.id)
    with pytest.raises(ValidationError, match="already exists"):
        await store.create("zone a", OTHER)


async def test_update_keeping_own_name_is_allowed(store) -> None:
    created = await store.create("Zone A", TRIANGLE)

    updated = await store.update(created.id, "zone a", OTHER)

    assert updated.name == "ZONE A"
    assert updated.points[0] == OTHER[0]
    assert updated.is_closed


async def test_update_to_taken_name_is_rejected(store) -> None:
    await store.create("Zone A", TRIANGLE)
    other = await store.create("Zone B", OTHER)

    with pytest.raises(ValidationError):
        await store.rename(other.id, "ZONE A")


async def test_validation_runs_before_storage(store, boundary_repository) -> None:
    with pytest.raises(ValidationError, match="at least 3 points"):
        await store.create("Zone", TRIANGLE[:2])
    with pytest.raises(ValidationError, match="boundary name"):
        await store.create("", TRIANGLE)

    assert (await boundary_repository.get_all_zone_boundaries_including_inactive()).value == []


async def test_duplicate_vertices_do_not_count_towards_minimum(store) -> None:
    a, b = BoundaryPoint(10.0, 125.0), BoundaryPoint(10.0, 125.1)

    with pytest.raises(ValidationError):
        await store.create("Line", [a, b, a])


async def test_soft_delete_frees_name_and_reactivate_checks_conflict(store) -> None:
    old = await store.create("Zone A", TRIANGLE)
    await store.soft_delete(old.id)

    assert [b.id for b in await store.list_active()] == []
    assert [b.is_active for b in await store.list_all()] == [False]

    await store.create("zone a", OTHER)
    with pytest.raises(ValidationError):
        await store.reactivate(old.id)


async def test_reactivate_restores_boundary(store) -> None:
    created = await store.create("Zone A", TRIANGLE)
    await store.soft_delete(created.id)

    restored = await store.reactivate(created.id)

    assert restored.is_active
    assert [b.name for b in await store.list_active()] == ["ZONE A"]


async def test_get_unknown_id_raises_not_found(store) -> None:
    with pytest.raises(NotFoundError):
        await store.get("missing")


async def test_rename_cascades_to_fares_and_compatibility(store) -> None:
    target = await store.create("San Jose", OTHER)
    origin = await store.create("Poblacion", TRIANGLE)
    await store.save(
        ZoneBoundary(
            id=origin.id,
            name=origin.name,
            points=origin.points,
            boundary_fares={"SAN JOSE": 30.0},
            compatible_boundaries=["SAN JOSE"],
        )
    )
    renamed_to: list[tuple[str, str]] = []

    async def listener(old: str, new: str) -> None:
        renamed_to.append((old, new))

    store.add_rename_listener(listener)
    await store.rename(target.id, "San Juan")

    origin = await store.get(origin.id)
    assert origin.boundary_fares == {"SAN JUAN": 30.0}
    assert origin.compatible_boundaries == ["SAN JUAN"]
    assert renamed_to == [("SAN JOSE", "SAN JUAN")]


async def test_rename_without_cascade_leaves_references(boundary_repository, rules) -> None:
    store = BoundaryStore(boundary_repository, timeout_seconds=1.0, cascade_renames=False, rules=rules)
    target = await store.create("San Jose", OTHER)
    origin = await store.add(
        ZoneBoundary(name="Poblacion", points=list(TRIANGLE), boundary_fares={"SAN JOSE": 30.0})
    )

    await store.rename(target.id, "San Juan")

    assert (await store.get(origin.id)).boundary_fares == {"SAN JOSE": 30.0}


async def test_repository_failure_surfaces_as_persistence_error(rules) -> None:
    store = BoundaryStore(FailingRepository(), timeout_seconds=1.0, rules=rules)

    with pytest.raises(PersistenceError, match="Firestore unavailable"):
        await store.create("Zone", TRIANGLE)


async def test_slow_repository_times_out(rules) -> None:
    store = BoundaryStore(SlowRepository(), timeout_seconds=0.01, rules=rules)

    with pytest.raises(PersistenceError, match="Timed out"):
        await store.list_active()


async def test_soft_delete_unknown_id_raises_not_found(store, boundary_repository) -> None:
    with pytest.raises(NotFoundError):
        await store.soft_delete("missing")
    assert (await boundary_repository.get_all_zone_boundaries()).value == []
