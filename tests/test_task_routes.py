"""HTTP tests for /api/tasks."""

import uuid
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def _create(client, payload):
    resp = client.post("/api/tasks", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_create_task(client, task_payload):
    resp = client.post("/api/tasks", json=task_payload)
    body = resp.get_json()
    assert resp.status_code == 201
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    assert body["data"]["duration"] == 60
    assert body["data"]["status"] == "pending"
    assert body["data"]["priority"] == "medium"
    assert uuid.UUID(body["data"]["id"])


def test_create_task_reports_all_violations(client, task_payload):
    task_payload.update(title="", endTime="08:00", isStaticSchedule="sometimes")
    resp = client.post("/api/tasks", json=task_payload)
    body = resp.get_json()
    assert resp.status_code == 400
    assert body["success"] is False
    assert body["error"] == "Invalid input data"
    assert {d["param"] for d in body["details"]} == {"title", "endTime", "isStaticSchedule"}
    assert client.get("/api/tasks").get_json()["data"] == []


def test_create_without_body(client):
    resp = client.post("/api/tasks", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_list_tasks_with_filters(client, task_payload):
    meeting = _create(client, task_payload)
    _create(client, dict(task_payload, category="Gym", startTime="07:00", endTime="08:00"))
    client.put(f"/api/tasks/{meeting['id']}", json={"status": "completed"})

    resp = client.get("/api/tasks", query_string={"status": "completed", "category": "Meeting"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert [t["id"] for t in body["data"]] == [meeting["id"]]

    everything = client.get("/api/tasks").get_json()["data"]
    assert [t["category"] for t in everything] == ["Gym", "Meeting"]


def test_list_rejects_bad_filters(client):
    resp = client.get("/api/tasks", query_string={"status": "archived", "startDate": "2023-05-10", "endDate": "2023-05-01"})
    body = resp.get_json()
    assert resp.status_code == 400
    assert body["error"] == "Invalid query parameters"
    assert [d["param"] for d in body["details"]] == ["status", "endDate"]


def test_list_static_schedule_query_flag(client, task_payload):
    static = _create(client, dict(task_payload, isStaticSchedule=True))
    _create(client, task_payload)
    data = client.get("/api/tasks?isStaticSchedule=true").get_json()["data"]
    assert [t["id"] for t in data] == [static["id"]]


def test_update_task(client, task_payload):
    task = _create(client, task_payload)
    resp = client.put(f"/api/tasks/{task['id']}", json={"endTime": "11:00", "priority": "high"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["data"]["duration"] == 120
    assert body["data"]["priority"] == "high"
    assert body["data"]["title"] == "Team Meeting"


def test_update_missing_task(client):
    resp = client.put(f"/api/tasks/{uuid.uuid4()}", json={"title": "Ghost"})
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "Task not found"}


def test_update_with_malformed_id(client):
    resp = client.put("/api/tasks/123", json={"title": "x"})
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["param"] == "taskId"


def test_update_with_only_unknown_fields(client, task_payload):
    task = _create(client, task_payload)
    resp = client.put(f"/api/tasks/{task['id']}", json={"color": "blue"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No valid fields to update"


def test_update_end_time_before_stored_start(client, task_payload):
    task = _create(client, task_payload)
    resp = client.put(f"/api/tasks/{task['id']}", json={"endTime": "08:30"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "End time must be after start time"


def test_delete_task(client, task_payload):
    task = _create(client, task_payload)
    resp = client.delete(f"/api/tasks/{task['id']}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Task deleted successfully"}

    again = client.delete(f"/api/tasks/{task['id']}")
    assert again.status_code == 404


def test_delete_with_malformed_id(client):
    resp = client.delete("/api/tasks/abc")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid task ID"


def test_storage_error_hides_detail(client, database):
    failure = OperationalError("SELECT", {}, Exception("secret dsn"))
    with patch.object(database, "execute", side_effect=failure):
        resp = client.get("/api/tasks")
    body = resp.get_json()
    assert resp.status_code == 500
    assert body == {"success": False, "error": "Error retrieving task"}


def test_storage_error_detail_in_debug_mode(app, client, database):
    app.config["EXPOSE_ERROR_DETAILS"] = True
    failure = OperationalError("SELECT", {}, Exception("secret dsn"))
    with patch.object(database, "execute", side_effect=failure):
        resp = client.get("/api/tasks")
    assert resp.status_code == 500
    assert "secret dsn" in resp.get_json()["details"][0]["message"]


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "Not Found"}


def test_tasks_blueprint_serves_no_ping(client):
    resp = client.get("/api/tasks/ping")
    assert resp.status_code == 405
    assert resp.get_json()["success"] is False
