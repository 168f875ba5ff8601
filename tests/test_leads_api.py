from datetime import UTC, datetime

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from spruce.app.api.responses import unwrap
from spruce.app.db.seed import build_store
from spruce.app.dependencies.store import get_store
from spruce.app.main import app
from spruce.app.schemas.action import ActionState

NOW = datetime(2024, 5, 10, 9, 30, tzinfo=UTC)


@pytest.fixture
def store():
    return build_store(lead_count=0, clock=lambda: NOW)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_lead(client, **overrides):
    payload = {
        "name": "Aarav Sharma",
        "email": "aarav.sharma@example.com",
        "phone_numbers": [{"title": "Mobile", "number": "9876543210"}],
        "source": "Website",
    }
    payload.update(overrides)
    response = client.post("/leads/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_and_get_lead(client):
    lead = create_lead(client)
    assert lead["stage"] == "New"
    assert lead["activities"][0]["type"] == "System"

    response = client.get(f"/leads/{lead['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "aarav.sharma@example.com"


def test_create_lead_validation_errors(client):
    response = client.post("/leads/", json={"name": "A", "email": "aarav@example.com", "source": "Social Media"})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "validation"
    assert detail["errors"]["name"] == ["Name must be at least 2 characters."]


def test_get_missing_lead(client):
    response = client.get("/leads/404")
    assert response.status_code == 404
    assert response.json()["detail"] == "Lead not found"


def test_list_leads_filters(client):
    create_lead(client, name="Aarav Sharma")
    second = create_lead(client, name="Sanya Iyer", email="sanya.iyer@example.com")
    client.post("/leads/bulk-update", json={"lead_ids": [second["id"]], "stage": "Contacted"})

    response = client.get("/leads/", params={"stage": "Contacted"})
    assert [lead["id"] for lead in response.json()] == [second["id"]]

    response = client.get("/leads/", params={"search": "aarav"})
    assert [lead["name"] for lead in response.json()] == ["Aarav Sharma"]


def test_update_lead(client):
    lead = create_lead(client)
    response = client.put(
        f"/leads/{lead['id']}",
        json={"name": "Aarav S.", "email": "aarav.sharma@example.com", "source": "Website", "assigned_user_id": "user-5"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == 'Lead "Aarav S." updated successfully.'
    assert client.get(f"/leads/{lead['id']}").json()["assigned_user_id"] == "user-5"


def test_update_missing_lead(client):
    response = client.put(
        "/leads/404",
        json={"name": "Nobody", "email": "nobody@example.com", "source": "Website", "assigned_user_id": "user-5"},
    )
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "Lead not found."


def test_bulk_delete_unknown_id_is_rejected(client, store):
    lead = create_lead(client)
    response = client.post("/leads/bulk-delete", json={"lead_ids": [lead["id"], "404"]})
    assert response.status_code == 404
    assert store.find_lead(lead["id"]) is not None

    response = client.post("/leads/bulk-delete", json={"lead_ids": [lead["id"]]})
    assert response.json()["message"] == "1 leads deleted successfully."


def test_tasks_and_activities(client):
    lead = create_lead(client)
    response = client.post(
        f"/leads/{lead['id']}/tasks",
        json={"type": "Follow-up", "due_date": "2024-05-11T10:00:00Z", "priority": "High", "notes": "Call back", "assigned_user_id": "user-5"},
    )
    assert response.status_code == 201
    assert response.json()["data"]["status"] == "Pending"
    assert len(client.get("/tasks", params={"assigned_user_id": "user-5"}).json()) == 1

    response = client.post(
        f"/leads/{lead['id']}/activities",
        json={"type": "Call", "outcome": "Interested", "notes": "Wants brochure", "user_id": "user-5", "stage": "Contacted"},
    )
    assert response.status_code == 201
    activities = client.get(f"/leads/{lead['id']}/activities").json()
    assert [activity["type"] for activity in activities] == ["Call", "System"]
    assert client.get(f"/leads/{lead['id']}").json()["stage"] == "Contacted"


def test_task_validation_error_summary(client):
    lead = create_lead(client)
    response = client.post(
        f"/leads/{lead['id']}/tasks",
        json={"type": "Follow-up", "due_date": "soon", "priority": "High", "notes": "Call back", "assigned_user_id": "user-5"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "Invalid form data: Invalid date"


def test_distribute_endpoint(client):
    create_lead(client)
    create_lead(client)
    response = client.post("/leads/distribute", json={"counselor_ids": ["user-5", "user-6"]})
    assert response.status_code == 200
    assert response.json()["message"] == "2 leads have been distributed successfully."


def test_bulk_upload_endpoint(client, store, monkeypatch):
    monkeypatch.setattr(store.settings, "bulk_upload_delay_seconds", 0)
    content = b"Name,Email,Source\nDiya Gupta,diya@example.com,Website\n"
    response = client.post(
        "/leads/bulk-upload",
        files={"file": ("leads.csv", content, "text/csv")},
        data={"counselor_ids": ["user-5"]},
    )
    assert response.status_code == 200, response.text
    assert store.leads[0].assigned_user_id == "user-5"


def test_kanban_and_funnel(client):
    create_lead(client)
    board = client.get("/pipeline/kanban", params={"prioritize": ["New"]}).json()
    assert len(board["New"]) == 1
    assert board["Dropped"] == []

    funnel = client.get("/pipeline/funnel").json()
    assert funnel[0] == {"stage": "New", "count": 1, "ratio": 1.0}


def test_counselor_summary_endpoint(client):
    lead = create_lead(client)
    client.post("/leads/bulk-update", json={"lead_ids": [lead["id"]], "assigned_user_id": "user-6"})

    response = client.get("/pipeline/counselors/user-6", params={"today": "2024-05-10"})
    assert response.status_code == 200
    body = response.json()
    assert body["total_leads"] == 1
    assert body["missed_follow_up"] is None

    assert client.get("/pipeline/counselors/user-404").status_code == 404


@pytest.mark.parametrize("code,status_code", [("validation", 422), ("not_found", 404), ("failed", 400)])
def test_unwrap_maps_error_codes(code, status_code):
    with pytest.raises(HTTPException) as exc:
        unwrap(ActionState(error="Nope.", code=code))
    assert exc.value.status_code == status_code
    assert exc.value.detail == {"error": "Nope.", "code": code}
