from conftest import register


def setup_objective(client, headers):
    return client.post(
        "/api/objectives",
        json={"name": "Learn Go", "category": "professional", "tracking_type": "counter", "cadence": "weekly"},
        headers=headers,
    ).json()["data"]


def test_resource_lifecycle(client, auth):
    _, headers = auth
    objective = setup_objective(client, headers)
    base = f"/api/objectives/{objective['id']}/resources"

    created = client.post(
        base,
        json={"title": "Tour of Go", "type": "website", "url": "https://go.dev/tour", "description": "basics"},
        headers=headers,
    )
    assert created.status_code == 201
    resource = created.json()["data"]
    assert resource["objective_id"] == objective["id"]

    listing = client.get(base, headers=headers).json()
    assert listing["count"] == 1

    updated = client.put(
        f"/api/resources/{resource['id']}",
        json={"title": "", "description": None},
        headers=headers,
    ).json()["data"]
    assert updated["title"] == "Tour of Go"
    assert updated["description"] is None

    assert client.delete(f"/api/resources/{resource['id']}", headers=headers).status_code == 200
    missing = client.get(f"/api/resources/{resource['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Resource not found"


def test_resources_follow_objective_ownership(client, auth):
    _, headers = auth
    objective = setup_objective(client, headers)
    resource = client.post(
        f"/api/objectives/{objective['id']}/resources",
        json={"title": "Book", "type": "book", "url": "https://example.com/book"},
        headers=headers,
    ).json()["data"]
    _, intruder = register(client, email="intruder@example.com")

    assert client.get(f"/api/resources/{resource['id']}", headers=intruder).status_code == 401
    assert (
        client.get(f"/api/objectives/{objective['id']}/resources", headers=intruder).status_code
        == 401
    )
