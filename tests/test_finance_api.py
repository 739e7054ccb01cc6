from goaltrack.objectives.ledger import utc_today

from conftest import register


def add_entry(client, headers, **overrides):
    body = {
        "name": "Salary",
        "type": "income",
        "amount": 1500,
        "date": utc_today().isoformat(),
        **overrides,
    }
    resp = client.post("/api/finances", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_create_applies_defaults(client, auth):
    _, headers = auth
    entry = add_entry(client, headers)
    assert entry["currency"] == "FCFA"
    assert entry["recurring"] is False
    assert entry["type"] == "income"


def test_list_newest_date_first(client, auth):
    _, headers = auth
    add_entry(client, headers, name="Old", date="2023-01-01")
    add_entry(client, headers, name="New", date="2023-06-01")

    body = client.get("/api/finances", headers=headers).json()
    assert body["count"] == 2
    assert [e["name"] for e in body["data"]] == ["New", "Old"]


def test_update_and_delete(client, auth):
    _, headers = auth
    entry = add_entry(client, headers, category="Work")
    url = f"/api/finances/{entry['id']}"

    updated = client.put(
        url, json={"name": "", "amount": 1800, "category": None}, headers=headers
    ).json()["data"]
    assert updated["name"] == "Salary"
    assert updated["amount"] == 1800
    assert updated["category"] is None

    assert client.delete(url, headers=headers).status_code == 200
    assert client.get(url, headers=headers).status_code == 404


def test_clearing_required_amount_is_a_database_error(client, auth):
    _, headers = auth
    entry = add_entry(client, headers)
    resp = client.put(f"/api/finances/{entry['id']}", json={"amount": None}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Database error"


def test_entries_are_private(client, auth):
    _, headers = auth
    entry = add_entry(client, headers)
    _, intruder = register(client, email="intruder@example.com")
    assert client.get(f"/api/finances/{entry['id']}", headers=intruder).status_code == 401


def test_stats_for_current_month(client, auth):
    _, headers = auth
    add_entry(client, headers)
    add_entry(client, headers, name="Rent", type="expense", amount=400, category="Housing")
    add_entry(client, headers, name="Market", type="expense", amount=100)

    data = client.get("/api/finances/stats", headers=headers).json()["data"]
    assert data["income"] == 1500
    assert data["expenses"] == 500
    assert {c["category"]: c["amount"] for c in data["expenses_by_category"]} == {
        "Housing": 400,
        "Uncategorized": 100,
    }
    assert len(data["evolution"]) == 6
    assert data["evolution"][-1]["income"] == 1500


def test_settings_defaults_and_partial_update(client, auth):
    _, headers = auth
    settings = client.get("/api/finances/settings", headers=headers).json()["data"]
    assert settings["default_currency"] == "FCFA"
    assert settings["theme"] == "light"

    updated = client.put(
        "/api/finances/settings", json={"theme": "dark", "default_currency": ""}, headers=headers
    ).json()["data"]
    assert updated["theme"] == "dark"
    assert updated["default_currency"] == "FCFA"
