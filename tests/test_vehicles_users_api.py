"""Tests for the vehicle and user management APIs."""

from datetime import datetime

import pytest

from dispatch.models.user import User
from dispatch.models.vehicle import Vehicle


def make_vehicle(vehicle_id=1, name="Van 1", color="#ff0000"):
    return Vehicle(id=vehicle_id, name=name, color=color, created_at=datetime(2024, 1, 1))


def make_user(user_id=2, username="wes", role="worker"):
    return User(
        id=user_id,
        username=username,
        password="pw",
        full_name="Wes Worker",
        role=role,
        created_at=datetime(2024, 1, 1),
    )


@pytest.mark.asyncio
async def test_list_vehicles(worker_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalars=[make_vehicle()])

    response = await worker_client.get("/api/vehicles")
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Van 1"


@pytest.mark.asyncio
async def test_create_vehicle(admin_client):
    response = await admin_client.post("/api/vehicles", json={"name": "Truck", "color": "#00ff00"})
    assert response.status_code == 201
    assert response.json()["name"] == "Truck"


@pytest.mark.asyncio
async def test_create_vehicle_rejects_bad_color(admin_client):
    response = await admin_client.post("/api/vehicles", json={"name": "Truck", "color": "green"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_rename_vehicle(admin_client, mock_db_session, make_result):
    vehicle = make_vehicle()
    mock_db_session.execute.return_value = make_result(scalar=vehicle)

    response = await admin_client.put("/api/vehicles/1", json={"name": "Van One"})
    assert response.status_code == 200
    assert vehicle.name == "Van One"
    assert vehicle.color == "#ff0000"


@pytest.mark.asyncio
async def test_delete_missing_vehicle(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=None)

    response = await admin_client.delete("/api/vehicles/5")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_users_hides_passwords(worker_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalars=[make_user()])

    response = await worker_client.get("/api/users")
    assert response.status_code == 200
    assert "password" not in response.json()[0]


@pytest.mark.asyncio
async def test_create_user(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=None)

    response = await admin_client.post(
        "/api/users",
        json={"username": "new", "password": "pw", "full_name": "New Worker"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "worker"


@pytest.mark.asyncio
async def test_create_duplicate_user(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=make_user())

    response = await admin_client.post(
        "/api/users",
        json={"username": "wes", "password": "pw", "full_name": "Wes Again"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(admin_client):
    response = await admin_client.delete("/api/users/1")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=make_user(1, "admin", "admin"))

    response = await admin_client.put("/api/users/1", json={"role": "worker"})
    assert response.status_code == 400
