import sqlite3
from datetime import timedelta

from goaltrack.objectives.ledger import utc_today

from conftest import register

BOOLEAN_OBJECTIVE = {
    "name": "Morning prayer",
    "category": "spiritual",
    "tracking_type": "boolean",
    "cadence": "daily",
}

NUMERIC_OBJECTIVE = {
    "name": "Run",
    "category": "personal",
    "tracking_type": "numeric",
    "cadence": "daily",
    "target": 5,
    "description": "km per day",
}


def create(client, headers, body):
    resp = client.post("/api/objectives", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_create_boolean_objective_seeds_today(client, auth):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)

    today = utc_today().isoformat()
    assert objective["progress"] == {today: False}
    assert objective["status"] == "active"
    assert objective["duration"] == 90
    assert objective["start_date"] == today


def test_create_numeric_objective_starts_empty(client, auth):
    _, headers = auth
    objective = create(client, headers, NUMERIC_OBJECTIVE)
    assert objective["progress"] == {}
    assert objective["target"] == 5


def test_create_rejects_unknown_category(client, auth):
    _, headers = auth
    resp = client.post(
        "/api/objectives", json={**BOOLEAN_OBJECTIVE, "category": "hobby"}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_list_reconciles_elapsed_days(client, auth):
    _, headers = auth
    start = (utc_today() - timedelta(days=3)).isoformat()
    created = create(client, headers, {**BOOLEAN_OBJECTIVE, "start_date": start})

    resp = client.get("/api/objectives", headers=headers)
    body = resp.json()
    assert body["count"] == 1
    progress = body["data"][0]["progress"]
    assert len(progress) == 4
    assert progress[start] is False
    assert body["data"][0]["id"] == created["id"]


def test_list_is_newest_first_and_scoped_to_owner(client, auth):
    _, headers = auth
    create(client, headers, BOOLEAN_OBJECTIVE)
    create(client, headers, NUMERIC_OBJECTIVE)
    _, other_headers = register(client, email="other@example.com")
    create(client, other_headers, BOOLEAN_OBJECTIVE)

    names = [o["name"] for o in client.get("/api/objectives", headers=headers).json()["data"]]
    assert names == ["Run", "Morning prayer"]


def test_progress_update_validates_against_tracking_type(client, auth):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)
    url = f"/api/objectives/{objective['id']}/progress"
    today = utc_today().isoformat()

    ok = client.patch(url, json={"date": today, "value": True}, headers=headers)
    assert ok.status_code == 200
    assert ok.json()["data"]["progress"][today] is True

    wrong_type = client.patch(url, json={"date": today, "value": 3}, headers=headers)
    assert wrong_type.status_code == 400

    bad_date = client.patch(url, json={"date": "13/01/2024", "value": True}, headers=headers)
    assert bad_date.status_code == 400

    missing = client.patch(url, json={"date": today}, headers=headers)
    assert missing.status_code == 400
    assert missing.json()["error"] == "Please provide a date and a value"


def test_progress_update_rejects_non_finite_numbers(client, auth):
    _, headers = auth
    objective = create(client, headers, NUMERIC_OBJECTIVE)
    url = f"/api/objectives/{objective['id']}"
    today = utc_today().isoformat()

    for raw in ("NaN", "Infinity", "-Infinity"):
        resp = client.patch(
            f"{url}/progress",
            content=f'{{"date": "{today}", "value": {raw}}}',
            headers={**headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    stored = client.get(url, headers=headers)
    assert stored.status_code == 200
    assert stored.json()["data"]["progress"] == {}
    assert client.get("/api/objectives", headers=headers).status_code == 200


def test_status_and_comment_updates(client, auth):
    _, headers = auth
    objective = create(client, headers, NUMERIC_OBJECTIVE)
    base = f"/api/objectives/{objective['id']}"

    resp = client.patch(f"{base}/status", json={"status": "paused"}, headers=headers)
    assert resp.json()["data"]["status"] == "paused"
    assert client.patch(f"{base}/status", json={}, headers=headers).status_code == 400
    assert (
        client.patch(f"{base}/status", json={"status": "archived"}, headers=headers).status_code
        == 400
    )

    resp = client.patch(
        f"{base}/comment", json={"date": "2024-05-01", "comment": "rainy"}, headers=headers
    )
    assert resp.json()["data"]["comments"] == {"2024-05-01": "rainy"}


def test_partial_update_keeps_and_clears_fields(client, auth):
    _, headers = auth
    objective = create(client, headers, NUMERIC_OBJECTIVE)
    url = f"/api/objectives/{objective['id']}"

    resp = client.put(url, json={"name": "", "target": "", "description": None}, headers=headers)
    data = resp.json()["data"]
    assert data["name"] == "Run"
    assert data["target"] is None
    assert data["description"] is None

    resp = client.put(url, json={"target": "7.5", "duration": "30"}, headers=headers)
    data = resp.json()["data"]
    assert data["target"] == 7.5
    assert data["duration"] == 30
    assert data["category"] == "personal"


def test_update_with_incompatible_ledger_is_rejected(client, auth):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)
    resp = client.put(
        f"/api/objectives/{objective['id']}", json={"tracking_type": "numeric"}, headers=headers
    )
    assert resp.status_code == 400


def test_other_users_cannot_touch_an_objective(client, auth):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)
    _, intruder = register(client, email="intruder@example.com")

    resp = client.get(f"/api/objectives/{objective['id']}", headers=intruder)
    assert resp.status_code == 401
    assert client.delete(f"/api/objectives/{objective['id']}", headers=intruder).status_code == 401


def test_delete_cascades_to_resources(client, auth, db):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)
    resource = client.post(
        f"/api/objectives/{objective['id']}/resources",
        json={"title": "Guide", "type": "article", "url": "https://example.com"},
        headers=headers,
    ).json()["data"]

    assert client.delete(f"/api/objectives/{objective['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/objectives/{objective['id']}", headers=headers).status_code == 404
    assert db.get_resource(resource["id"]) is None


def test_statistics_endpoint(client, auth):
    _, headers = auth
    objective = create(client, headers, BOOLEAN_OBJECTIVE)
    today = utc_today().isoformat()
    client.patch(
        f"/api/objectives/{objective['id']}/progress",
        json={"date": today, "value": True},
        headers=headers,
    )

    data = client.get("/api/objectives/statistics", headers=headers).json()["data"]
    assert data["total_objectives"] == 1
    assert data["completed_today"] == 1
    assert data["completion_rate"] == 100
    assert data["categories"]["spiritual"]["active_objectives"] == 1

    future = (utc_today() + timedelta(days=1)).isoformat()
    windowed = client.get(
        f"/api/objectives/statistics?start={future}", headers=headers
    ).json()["data"]
    assert windowed["completion_rate"] == 0


def test_reconcile_endpoint_reports_updates(client, auth):
    _, headers = auth
    start = (utc_today() - timedelta(days=2)).isoformat()
    create(client, headers, {**BOOLEAN_OBJECTIVE, "start_date": start})

    first = client.post("/api/objectives/reconcile", headers=headers).json()
    assert first["data"] == {"updated": 1}
    assert first["message"] == "1 objective(s) updated with missing progress."

    second = client.post("/api/objectives/reconcile", headers=headers).json()
    assert second["data"] == {"updated": 0}


def test_database_errors_map_to_400(client, auth, db, monkeypatch):
    _, headers = auth

    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(db, "list_objectives", broken)
    resp = client.get("/api/objectives", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Database error"}
