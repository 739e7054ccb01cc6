from datetime import datetime, timedelta, timezone

from jose import jwt

from conftest import register


def test_register_returns_token_and_user(client):
    user, headers = register(client)
    assert user["email"] == "amina@example.com"
    assert "password" not in user

    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Amina"


def test_duplicate_email_is_rejected(client):
    register(client)
    resp = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "amina@example.com", "password": "x"},
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "A user with this email already exists",
    }


def test_login(client):
    register(client)
    ok = client.post(
        "/api/auth/login", json={"email": "amina@example.com", "password": "secret123"}
    )
    assert ok.status_code == 200
    assert ok.json()["token"]

    bad = client.post(
        "/api/auth/login", json={"email": "amina@example.com", "password": "wrong"}
    )
    assert bad.status_code == 401
    assert bad.json()["error"] == "Invalid credentials"


def test_missing_and_invalid_tokens(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid token"


def test_expired_token(client, settings):
    user, _ = register(client)
    token = jwt.encode(
        {"id": user["id"], "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Token expired"


def test_token_for_deleted_user(client, settings):
    token = jwt.encode(
        {"id": "ghost", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "User not found"
