"""
Integration tests for the user endpoints.
"""

import pytest

from movr.tests.helpers import RIDER_EMAIL


@pytest.mark.asyncio
async def test_register_and_fetch_profile(client):
    response = await client.post("/api/users/register", json={
        "email": "new@test.com",
        "first_name": "New",
        "last_name": "Rider",
        "phone_numbers": ["555-0199", "555-0198"]
    })
    assert response.status_code == 201
    assert response.json()["messages"] == ["User successfully created"]

    response = await client.get("/api/users", params={"email": "new@test.com"})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["first_name"] == "New"
    assert user["phone_numbers"] == ["555-0199", "555-0198"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client, rider):
    response = await client.post("/api/users/register", json={
        "email": RIDER_EMAIL,
        "first_name": "Copy",
        "last_name": "Cat"
    })

    assert response.status_code == 409
    assert response.json()["message"] == "User not created: user already exists"


@pytest.mark.asyncio
async def test_profile_requires_email(client):
    response = await client.get("/api/users")

    assert response.status_code == 400
    assert response.json()["messages"] == ["No user email provided."]


@pytest.mark.asyncio
async def test_profile_unknown_user(client):
    response = await client.get("/api/users", params={"email": "ghost@test.com"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_login(client, rider):
    response = await client.post("/api/users/login", json={"email": RIDER_EMAIL})

    assert response.status_code == 200
    assert response.json() == {"is_authenticated": True}


@pytest.mark.asyncio
async def test_login_failures(client):
    response = await client.post("/api/users/login", json={})
    assert response.status_code == 400

    response = await client.post("/api/users/login", json={"email": "ghost@test.com"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_account(client, rider):
    response = await client.delete("/api/users", params={"email": RIDER_EMAIL})
    assert response.status_code == 200

    response = await client.get("/api/users", params={"email": RIDER_EMAIL})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_account_during_active_ride(client, rider, vehicle):
    response = await client.post("/api/rides/start", json={"vehicle_id": vehicle.id, "email": RIDER_EMAIL})
    assert response.status_code == 200

    response = await client.delete("/api/users", params={"email": RIDER_EMAIL})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_account_keeps_past_rides_anonymous(client, rider, vehicle, db_session):
    from sqlalchemy import select
    from movr.app.models.ride import Ride

    await client.post("/api/rides/start", json={"vehicle_id": vehicle.id, "email": RIDER_EMAIL})
    await client.post("/api/rides/end", json={
        "vehicle_id": vehicle.id, "email": RIDER_EMAIL, "battery": 50, "latitude": 0.0, "longitude": 0.01
    })

    response = await client.delete("/api/users", params={"email": RIDER_EMAIL})
    assert response.status_code == 200

    result = await db_session.execute(select(Ride.user_email, Ride.vehicle_id))
    rows = result.all()
    assert len(rows) == 1
    assert rows[0].user_email is None
    assert rows[0].vehicle_id == vehicle.id
