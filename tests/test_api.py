import pytest
from fastapi.testclient import TestClient

from zone_engine.api.dependencies import build_services, get_services
from zone_engine.main import create_app
from zone_engine.models.result import Result
from zone_engine.persistence.memory import InMemoryFareBatchRepository, InMemoryZoneBoundaryRepository

POBLACION = [
    {"latitude": 10.00, "longitude": 125.50},
    {"latitude": 10.00, "longitude": 125.52},
    {"latitude": 10.02, "longitude": 125.52},
    {"latitude": 10.02, "longitude": 125.50},
]
SAN_JOSE = [
    {"latitude": 10.10, "longitude": 125.50},
    {"latitude": 10.10, "longitude": 125.52},
    {"latitude": 10.12, "longitude": 125.52},
]


class BrokenBoundaryRepository(InMemoryZoneBoundaryRepository):
    async def get_all_zone_boundaries(self):
        return Result.failure("connection refused")


def _client(boundary_repository=None) -> TestClient:
    services = build_services(
        boundary_repository or InMemoryZoneBoundaryRepository(),
        InMemoryFareBatchRepository(),
    )
    app = create_app()
    app.dependency_overrides[get_services] = lambda: services
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return _client()


def _create(client: TestClient, name: str, points) -> dict:
    response = client.post("/api/boundaries", json={"name": name, "points": points})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}

    storage = client.get("/api/health/storage").json()
    assert storage["connected"] is True
    assert storage["active_boundaries"] == 0


def test_create_and_list_boundaries(client) -> None:
    created = _create(client, "poblacion", POBLACION)

    assert created["name"] == "POBLACION"
    assert created["points"][0] == created["points"][-1]
    assert len(created["points"]) == 5

    listed = client.get("/api/boundaries").json()
    assert [b["id"] for b in listed] == [created["id"]]


def test_validation_and_not_found_status_codes(client) -> None:
    _create(client, "Poblacion", POBLACION)

    duplicate = client.post("/api/boundaries", json={"name": "POBLACION", "points": SAN_JOSE})
    assert duplicate.status_code == 400
    assert "already exists" in duplicate.json()["detail"]

    too_small = client.post("/api/boundaries", json={"name": "Tiny", "points": SAN_JOSE[:2]})
    assert too_small.status_code == 400

    missing = client.put("/api/boundaries/nope", json={"name": "Anything"})
    assert missing.status_code == 404


def test_repository_failure_maps_to_503() -> None:
    client = _client(BrokenBoundaryRepository())

    response = client.get("/api/boundaries")

    assert response.status_code == 503
    assert "connection refused" in response.json()["detail"]


def test_rename_delete_and_reactivate(client) -> None:
    created = _create(client, "Poblacion", POBLACION)

    renamed = client.put(f"/api/boundaries/{created['id']}", json={"name": "Centro"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "CENTRO"
    assert renamed.json()["points"] == created["points"]

    assert client.delete(f"/api/boundaries/{created['id']}").status_code == 204
    assert client.get("/api/boundaries").json() == []
    assert client.delete(f"/api/boundaries/{created['id']}").status_code == 409

    all_boundaries = client.get("/api/boundaries", params={"include_inactive": True}).json()
    assert [b["is_active"] for b in all_boundaries] == [False]

    restored = client.post(f"/api/boundaries/{created['id']}/reactivate")
    assert restored.status_code == 200
    assert restored.json()["is_active"] is True


def test_fares_and_trip_resolution(client) -> None:
    origin = _create(client, "Poblacion", POBLACION)
    _create(client, "San Jose", SAN_JOSE)

    response = client.put(f"/api/boundaries/{origin['id']}/fares", json={"fares": {"san jose": 30}})
    assert response.json()["boundary_fares"] == {"SAN JOSE": 30.0}

    put = client.put("/api/fares/destinations/City Hall", json={"fares": {"Poblacion": 25}})
    assert put.status_code == 200
    assert put.json()["display"] == "POBLACION: ₱25.0"

    lookup = client.get("/api/fares", params={"from_boundary": "poblacion", "to": "san jose"})
    assert lookup.json()["fare"] == 30.0

    trip = client.get(
        "/api/fares/trip",
        params={
            "pickup_latitude": 10.01,
            "pickup_longitude": 125.51,
            "destination": "City Hall",
            "destination_latitude": 10.5,
            "destination_longitude": 125.9,
        },
    )
    assert trip.json()["fare"] == 25.0

    cleared = client.put("/api/fares/destinations/City Hall", json={"fares": {}})
    assert cleared.json() == {"destination": "City Hall", "fares": {}, "display": "No boundary fares set"}


def test_negative_fare_is_rejected(client) -> None:
    response = client.put("/api/fares/destinations/Mall", json={"fares": {"Poblacion": -1}})
    assert response.status_code == 400


def test_compatibility_and_locate(client) -> None:
    origin = _create(client, "Poblacion", POBLACION)
    _create(client, "San Jose", SAN_JOSE)

    client.put(
        f"/api/boundaries/{origin['id']}/compatibility",
        json={"compatible_boundaries": ["san jose"]},
    )

    forward = client.get("/api/compatibility", params={"a": "Poblacion", "b": "San Jose"}).json()
    backward = client.get("/api/compatibility", params={"a": "San Jose", "b": "Poblacion"}).json()
    assert forward["compatible"] is True
    assert backward["compatible"] is False

    located = client.get("/api/boundaries/locate", params={"latitude": 10.01, "longitude": 125.51}).json()
    assert located["boundary"] == "POBLACION"


def test_export_geojson(client) -> None:
    _create(client, "Poblacion", POBLACION)

    collection = client.get("/api/boundaries/export.geojson").json()

    assert collection["type"] == "FeatureCollection"
    (feature,) = collection["features"]
    assert feature["properties"]["name"] == "POBLACION"
    assert feature["geometry"]["coordinates"][0][0] == [125.50, 10.00]
    assert feature["properties"]["wkt"].startswith("POLYGON((125.5 10.0,")
