"""Tests for the absences API."""

from datetime import date, datetime

import pytest

from dispatch.models.absence import Absence
from dispatch.models.user import User


def make_user(user_id=2, full_name="Wes Worker", role="worker"):
    return User(
        id=user_id,
        username=f"user{user_id}",
        password="pw",
        full_name=full_name,
        role=role,
        created_at=datetime(2024, 1, 1),
    )


def make_absence(absence_id=9, user=None, start=date(2024, 6, 12), end=date(2024, 6, 15), **kwargs):
    user = user or make_user(3, "Ann")
    values = dict(
        id=absence_id,
        user_id=user.id,
        start_date=start,
        end_date=end,
        reason="Vacation",
        absence_type="vacation",
        status="approved",
        requires_approval=False,
        created_at=datetime(2024, 5, 1),
    )
    values.update(kwargs)
    absence = Absence(**values)
    absence.user = user
    return absence


REQUEST = {"start_date": "2024-06-10", "end_date": "2024-06-12"}


@pytest.mark.asyncio
async def test_absence_without_overlap_is_approved(worker_client, mock_db_session, make_result):
    mock_db_session.execute.side_effect = [
        make_result(scalar=make_user()),
        make_result(scalars=[]),
    ]

    response = await worker_client.post("/api/absences", json=REQUEST)
    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == 2
    assert data["user_name"] == "Wes Worker"
    assert data["status"] == "approved"
    assert data["requires_approval"] is False
    assert data["reason"] == "Vacation"
    assert data["can_edit"] is True


@pytest.mark.asyncio
async def test_overlap_needs_confirmation(worker_client, mock_db_session, make_result):
    mock_db_session.execute.side_effect = [
        make_result(scalar=make_user()),
        make_result(scalars=[make_absence(status="pending")]),
    ]

    response = await worker_client.post("/api/absences", json=REQUEST)
    assert response.status_code == 409
    assert response.json()["detail"] == ["Ann"]
    mock_db_session.add.assert_not_called()


@pytest.mark.asyncio
async def test_confirmed_overlap_is_pending(worker_client, mock_db_session, make_result):
    mock_db_session.execute.side_effect = [
        make_result(scalar=make_user()),
        make_result(scalars=[make_absence()]),
    ]

    response = await worker_client.post("/api/absences", json={**REQUEST, "confirm": True})
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["requires_approval"] is True


@pytest.mark.asyncio
async def test_other_reason(worker_client, mock_db_session, make_result):
    mock_db_session.execute.side_effect = [
        make_result(scalar=make_user()),
        make_result(scalars=[]),
    ]

    response = await worker_client.post(
        "/api/absences",
        json={"start_date": "2024-06-10", "absence_type": "other", "custom_reason": " Doctor "},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["reason"] == "Doctor"
    assert data["custom_reason"] == "Doctor"
    assert data["end_date"] == "2024-06-10"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"start_date": "2024-06-10", "absence_type": "other"},
        {"start_date": "2024-06-10", "absence_type": "other", "custom_reason": "   "},
        {"start_date": "2024-06-12", "end_date": "2024-06-10"},
        {"start_date": "2024-06-10", "absence_type": "sabbatical"},
    ],
)
async def test_invalid_absence_requests(worker_client, body):
    response = await worker_client.post("/api/absences", json=body)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_worker_cannot_request_for_others(worker_client, mock_db_session):
    response = await worker_client.post("/api/absences", json={**REQUEST, "user_id": 3})
    assert response.status_code == 403
    mock_db_session.execute.assert_not_called()


@pytest.mark.asyncio
async def test_admin_can_request_for_others(admin_client, mock_db_session, make_result):
    mock_db_session.execute.side_effect = [
        make_result(scalar=make_user(3, "Ann")),
        make_result(scalars=[]),
    ]

    response = await admin_client.post("/api/absences", json={**REQUEST, "user_id": 3})
    assert response.status_code == 201
    assert response.json()["user_id"] == 3


@pytest.mark.asyncio
async def test_request_for_unknown_user(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=None)

    response = await admin_client.post("/api/absences", json={**REQUEST, "user_id": 42})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_approve_pending_absence(admin_client, mock_db_session, make_result):
    absence = make_absence(status="pending", requires_approval=True)
    mock_db_session.execute.return_value = make_result(scalar=absence)

    response = await admin_client.put("/api/absences/9/status", json={"status": "approved"})
    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert absence.status == "approved"


@pytest.mark.asyncio
@pytest.mark.parametrize("current", ["approved", "rejected"])
async def test_decided_absence_cannot_change(admin_client, mock_db_session, make_result, current):
    mock_db_session.execute.return_value = make_result(scalar=make_absence(status=current))

    response = await admin_client.put("/api/absences/9/status", json={"status": "rejected"})
    assert response.status_code == 409
    assert response.json()["detail"] == {"status": current}


@pytest.mark.asyncio
async def test_status_change_requires_admin(worker_client):
    response = await worker_client.put("/api/absences/9/status", json={"status": "approved"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_status_must_be_a_decision(admin_client):
    response = await admin_client.put("/api/absences/9/status", json={"status": "pending"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_owner_can_delete(worker_client, mock_db_session, make_result):
    absence = make_absence(user=make_user())
    mock_db_session.execute.return_value = make_result(scalar=absence)

    response = await worker_client.delete("/api/absences/9")
    assert response.status_code == 200
    mock_db_session.delete.assert_awaited_once_with(absence)


@pytest.mark.asyncio
async def test_worker_cannot_delete_others(worker_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=make_absence())

    response = await worker_client.delete("/api/absences/9")
    assert response.status_code == 403
    mock_db_session.delete.assert_not_called()


@pytest.mark.asyncio
async def test_list_absences_sets_can_edit(worker_client, mock_db_session, make_result):
    own = make_absence(1, user=make_user())
    other = make_absence(2)
    mock_db_session.execute.return_value = make_result(scalars=[own, other])

    response = await worker_client.get("/api/absences", params={"status": "approved"})
    assert response.status_code == 200
    assert [(a["id"], a["can_edit"]) for a in response.json()] == [(1, True), (2, False)]


@pytest.mark.asyncio
async def test_overlaps_endpoint(worker_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalars=[make_absence()])

    response = await worker_client.get(
        "/api/absences/overlaps", params={"start": "2024-06-10", "end": "2024-06-12"}
    )
    assert response.status_code == 200
    assert response.json() == {"overlapping_users": ["Ann"], "requires_approval": True}


@pytest.mark.asyncio
async def test_overlaps_exclude_requesting_user(worker_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalars=[make_absence()])

    response = await worker_client.get(
        "/api/absences/overlaps", params={"start": "2024-06-12", "user_id": 3}
    )
    assert response.json() == {"overlapping_users": [], "requires_approval": False}


@pytest.mark.asyncio
async def test_pending_count(admin_client, mock_db_session, make_result):
    mock_db_session.execute.return_value = make_result(scalar=3)

    response = await admin_client.get("/api/absences/pending/count")
    assert response.status_code == 200
    assert response.json() == {"count": 3}
