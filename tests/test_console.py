import asyncio

import pytest

from zone_engine.models.domain import points_from_pairs
from zone_engine.services.boundaries.console import ZoneBoundaryConsole
from zone_engine.services.drawing.machine import BoundaryDrawingMachine

POBLACION = [(10.00, 125.50), (10.01, 125.50), (10.01, 125.51)]


@pytest.fixture
def console(store, fares, compatibility, rules) -> ZoneBoundaryConsole:
    return ZoneBoundaryConsole(
        store=store,
        fares=fares,
        compatibility=compatibility,
        machine=BoundaryDrawingMachine(rules=rules),
    )


def _draw(console: ZoneBoundaryConsole) -> None:
    console.start_drawing()
    for lat, lng in POBLACION:
        console.on_point_tapped(lat, lng)


async def test_finish_drawing_persists_and_refreshes(console) -> None:
    _draw(console)

    stored = await console.finish_drawing("poblacion")

    assert stored is not None and stored.id
    assert not console.is_drawing
    assert not console.state.is_loading
    assert [b.name for b in console.state.boundaries] == ["POBLACION"]
    assert console.state.success_message == "Boundary POBLACION saved"


async def test_failed_save_keeps_drawing_buffer(console, store) -> None:
    await store.create("Poblacion", points_from_pairs(POBLACION))
    _draw(console)

    stored = await console.finish_drawing("POBLACION")

    assert stored is None
    assert console.is_drawing
    assert len(console.points) == 3
    assert "already exists" in console.state.error_message
    assert "already exists" in console.machine.state.error_message

    retried = await console.finish_drawing("Poblacion Norte")
    assert retried is not None
    assert retried.name == "POBLACION NORTE"


async def test_validation_failure_is_reported_not_raised(console) -> None:
    console.start_drawing()
    console.on_point_tapped(10.0, 125.5)

    assert await console.finish_drawing("Zone") is None
    assert console.state.error_message == "A boundary must have at least 3 points"
    assert console.is_drawing


async def test_edit_round_trip_updates_existing_boundary(console) -> None:
    _draw(console)
    created = await console.finish_drawing("Poblacion")

    console.start_editing(created.id)
    assert len(console.points) == 3
    console.on_point_tapped(10.00, 125.51)
    edited = await console.finish_drawing("Poblacion")

    assert edited.id == created.id
    assert len(edited.points) == 5
    assert len(console.state.boundaries) == 1


async def test_operations_on_unloaded_ids_report_not_found(console) -> None:
    await console.refresh()

    assert not await console.delete_boundary("missing")
    assert console.state.error_message == "Boundary not found"

    console.dismiss_messages()
    console.start_editing("missing")
    assert console.state.error_message == "Boundary not found"
    assert not console.is_drawing


async def test_delete_and_reactivate(console) -> None:
    _draw(console)
    created = await console.finish_drawing("Poblacion")

    assert await console.delete_boundary(created.id)
    assert console.state.boundaries == ()
    assert console.state.success_message == "Boundary deleted successfully"

    await console.refresh(include_inactive=True)
    assert await console.reactivate_boundary(created.id)
    assert [b.is_active for b in console.state.boundaries] == [True]


async def test_fare_and_compatibility_updates(console, fares, compatibility) -> None:
    _draw(console)
    created = await console.finish_drawing("Poblacion")

    assert await console.update_boundary_fares(created.id, {"san jose": 30})
    assert await console.update_compatible_boundaries(created.id, ["San Jose"])
    assert await console.set_destination_fares("Mall", {"Poblacion": 50})

    assert await fares.get_fare("POBLACION", "Mall") == 50
    assert await compatibility.is_compatible("POBLACION", "SAN JOSE")
    assert console.state.boundaries[0].boundary_fares == {"SAN JOSE": 30.0}


async def test_invalid_fare_sets_error_message(console) -> None:
    assert not await console.set_destination_fares("Mall", {"Poblacion": -10})
    assert "must not be negative" in console.state.error_message


async def test_new_drawing_waits_for_in_flight_save(console, store, monkeypatch) -> None:
    release = asyncio.Event()
    add = store.add

    async def slow_add(boundary):
        await release.wait()
        return await add(boundary)

    monkeypatch.setattr(store, "add", slow_add)
    _draw(console)
    saving = asyncio.create_task(console.finish_drawing("poblacion"))
    await asyncio.sleep(0)

    assert console.state.is_saving
    console.start_drawing()
    assert not console.is_drawing
    assert console.state.error_message == "A boundary save is still in progress"

    release.set()
    assert (await saving).name == "POBLACION"
    assert not console.state.is_saving

    console.start_drawing()
    assert console.is_drawing
