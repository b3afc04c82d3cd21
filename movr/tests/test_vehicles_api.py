"""
Integration tests for the vehicle endpoints.

Tests registration, listing, lookup with history, deletion and the
anonymous checkout/checkin flow over HTTP.
"""

import pytest

from movr.tests.helpers import RIDER_EMAIL

# Note: Client and DB setup are in conftest.py


async def add_vehicle(client, **overrides):
    payload = {"battery": 80, "latitude": 40.7128, "longitude": -74.0060, "vehicle_type": "scooter"}
    payload.update(overrides)
    return await client.post("/api/vehicles/add", json=payload)


@pytest.mark.asyncio
async def test_add_and_get_vehicle(client):
    response = await add_vehicle(client)
    assert response.status_code == 201
    vehicle_id = response.json()["vehicle_id"]

    response = await client.get(f"/api/vehicles/{vehicle_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == vehicle_id
    assert data["in_use"] is False
    assert data["state"] == "AVAILABLE"
    assert data["battery"] == 80
    assert len(data["location_history"]) == 1
    assert data["location_history"][0]["latitude"] == 40.7128


@pytest.mark.asyncio
async def test_add_vehicle_reports_every_invalid_value(client):
    response = await add_vehicle(client, battery=120, latitude=-95.0, longitude=190.0)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION_001"
    assert len(body["messages"]) == 3


@pytest.mark.asyncio
async def test_add_vehicle_missing_field(client):
    response = await client.post("/api/vehicles/add", json={"battery": 80, "vehicle_type": "bike"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_list_vehicles_respects_limit(client):
    for _ in range(3):
        await add_vehicle(client)

    response = await client.get("/api/vehicles", params={"max_vehicles": 2})
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = await client.get("/api/vehicles")
    assert len(response.json()) == 3


@pytest.mark.asyncio
async def test_list_vehicles_rejects_zero_limit(client):
    response = await client.get("/api/vehicles", params={"max_vehicles": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_unknown_vehicle(client):
    response = await client.get("/api/vehicles/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_checkout_and_checkin(client, vehicle):
    response = await client.put(f"/api/vehicles/{vehicle.id}/checkout")
    assert response.status_code == 200
    assert response.json()["messages"] == [f"Ride started with vehicle {vehicle.id}"]

    response = await client.put(f"/api/vehicles/{vehicle.id}/checkout")
    assert response.status_code == 409

    response = await client.put(
        f"/api/vehicles/{vehicle.id}/checkin",
        json={"battery": 65, "latitude": 0.01, "longitude": 0.01}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["vehicle_id"] == vehicle.id
    assert data["summary"]["distance_km"] > 0
    assert data["messages"][0] == f"You have completed your ride on vehicle {vehicle.id}."

    response = await client.get(f"/api/vehicles/{vehicle.id}")
    data = response.json()
    assert data["in_use"] is False
    assert data["battery"] == 65
    assert len(data["location_history"]) == 3


@pytest.mark.asyncio
async def test_checkin_available_vehicle_conflicts(client, vehicle):
    response = await client.put(
        f"/api/vehicles/{vehicle.id}/checkin",
        json={"battery": 65, "latitude": 0.01, "longitude": 0.01}
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_checkin_invalid_battery(client, vehicle):
    await client.put(f"/api/vehicles/{vehicle.id}/checkout")

    response = await client.put(
        f"/api/vehicles/{vehicle.id}/checkin",
        json={"battery": 150, "latitude": 0.01, "longitude": 0.01}
    )

    assert response.status_code == 400
    assert response.json()["messages"] == ["Battery (percent) must be between 0 and 100."]


@pytest.mark.asyncio
async def test_delete_vehicle(client, vehicle):
    response = await client.delete(f"/api/vehicles/{vehicle.id}/delete")
    assert response.status_code == 200

    response = await client.get(f"/api/vehicles/{vehicle.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_vehicle_in_use_conflicts(client, vehicle):
    await client.put(f"/api/vehicles/{vehicle.id}/checkout")

    response = await client.delete(f"/api/vehicles/{vehicle.id}/delete")
    assert response.status_code == 409

    response = await client.get(f"/api/vehicles/{vehicle.id}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_checkin_with_nan_coordinate(client, vehicle):
    await client.put(f"/api/vehicles/{vehicle.id}/checkout")

    response = await client.put(
        f"/api/vehicles/{vehicle.id}/checkin",
        content='{"battery": 65, "latitude": NaN, "longitude": 0.01}',
        headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["messages"] == ["Latitude must be between -90 and 90"]


@pytest.mark.asyncio
async def test_checkin_during_user_ride_conflicts(client, vehicle, rider):
    await client.post("/api/rides/start", json={"vehicle_id": vehicle.id, "email": RIDER_EMAIL})

    response = await client.put(
        f"/api/vehicles/{vehicle.id}/checkin",
        json={"battery": 65, "latitude": 0.01, "longitude": 0.01}
    )
    assert response.status_code == 409

    response = await client.get("/api/rides/active", params={"vehicle_id": vehicle.id, "email": RIDER_EMAIL})
    assert response.status_code == 200
