from __future__ import annotations

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

VALID = {"title": "A", "description": "B", "dueDate": "2024-01-01"}


def test_root_liveness(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.mimetype == "text/plain"
    assert res.get_data(as_text=True) == "SyncVision Backend is running"


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok", "service": "SyncVision API"}


def test_create_task_defaults_status_to_pending(client, fake_db):
    res = client.post("/tasks", json=VALID)

    assert res.status_code == 200
    body = res.get_json()
    assert body["title"] == "A"
    assert body["description"] == "B"
    assert body["status"] == "Pending"
    assert body["dueDate"] == "2024-01-01T00:00:00.000Z"
    assert isinstance(body["_id"], str) and len(body["_id"]) == 24
    assert body["createdAt"].endswith("Z")
    assert body["updatedAt"] == body["createdAt"]
    assert "assignedTo" not in body
    assert len(fake_db.tasks.docs) == 1


def test_create_task_with_optional_fields(client):
    res = client.post(
        "/tasks",
        json={**VALID, "status": "In Progress", "assignedTo": "sam", "dueDate": "2024-03-05T10:30:00Z"},
    )
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "In Progress"
    assert body["assignedTo"] == "sam"
    assert body["dueDate"] == "2024-03-05T10:30:00.000Z"


def test_create_task_missing_fields_returns_400_and_creates_nothing(client, fake_db):
    res = client.post("/tasks", json={"title": "A"})

    assert res.status_code == 400
    assert res.get_json() == {"error": "Title, description, and dueDate are required."}
    assert fake_db.tasks.docs == []


@pytest.mark.parametrize(
    "body",
    [
        {**VALID, "title": ""},
        {**VALID, "status": "Done"},
        {**VALID, "dueDate": "not-a-date"},
        {**VALID, "title": 5},
        {**VALID, "assignedTo": ["x"]},
        {**VALID, "priority": "high"},
    ],
)
def test_create_task_rejects_off_schema_input(client, fake_db, body):
    res = client.post("/tasks", json=body)
    assert res.status_code == 400
    assert res.get_json()["error"]
    assert fake_db.tasks.docs == []


def test_create_task_rejects_non_json_body(client, fake_db):
    res = client.post("/tasks", data="title=A", content_type="application/x-www-form-urlencoded")
    assert res.status_code == 400
    assert fake_db.tasks.docs == []


def test_list_tasks_returns_created_tasks(client):
    first = client.post("/tasks", json=VALID).get_json()
    second = client.post("/tasks", json={**VALID, "title": "C"}).get_json()

    res = client.get("/tasks")

    assert res.status_code == 200
    listed = res.get_json()
    assert isinstance(listed, list)
    assert {t["_id"] for t in listed} == {first["_id"], second["_id"]}
    assert {t["title"] for t in listed} == {"A", "C"}


def test_list_tasks_empty(client):
    res = client.get("/tasks")
    assert res.status_code == 200
    assert res.get_json() == []


def test_list_tasks_store_failure_returns_500(client, fake_db):
    fake_db.tasks.fail_with = ServerSelectionTimeoutError("no servers")
    res = client.get("/tasks")
    assert res.status_code == 500
    assert res.get_json() == {"error": "Error fetching tasks"}


def test_create_task_store_failure_returns_500(client, fake_db):
    fake_db.tasks.fail_with = OperationFailure("write failed")
    res = client.post("/tasks", json=VALID)
    assert res.status_code == 500
    assert res.get_json() == {"error": "Error creating task"}


def test_unknown_route_returns_json_404(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.get_json() == {"error": "Not Found"}


def test_cors_header_present(client):
    res = client.get("/tasks", headers={"Origin": "http://example.com"})
    # older flask-cors answers "*", newer releases echo the request Origin
    assert res.headers.get("Access-Control-Allow-Origin") in {"*", "http://example.com"}


def test_create_task_due_date_before_year_1000_is_zero_padded(client):
    res = client.post("/tasks", json={**VALID, "dueDate": "0999-01-01"})
    assert res.status_code == 200
    assert res.get_json()["dueDate"] == "0999-01-01T00:00:00.000Z"


def test_create_task_falls_back_to_inserted_document_when_read_back_misses(client, fake_db, monkeypatch):
    monkeypatch.setattr(fake_db.tasks, "find_one", lambda filter=None: None)

    res = client.post("/tasks", json=VALID)

    assert res.status_code == 200
    body = res.get_json()
    assert body["_id"] == str(fake_db.tasks.docs[0]["_id"])
    assert body["title"] == "A"
    assert body["status"] == "Pending"
