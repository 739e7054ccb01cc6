from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from goaltrack.config import Settings
from goaltrack.main import create_app
from goaltrack.objectives.enums import Cadence, Category, Status, TrackingType
from goaltrack.objectives.ledger import CommentLedger, Ledger
from goaltrack.objectives.models import Objective


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_path=str(tmp_path / "test.db"),
        jwt_secret="test-secret",
        reconcile_sweep_enabled=False,
        openai_api_key="",
        deepseek_api_key="",
        log_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def db(app):
    return app.state.db


@pytest.fixture
def client(app):
    return TestClient(app)


def register(client, email="amina@example.com", name="Amina", password="secret123"):
    resp = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["data"], {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def auth(client):
    """Registered user and its auth headers."""
    return register(client)


def make_objective(
    name="Read",
    tracking_type=TrackingType.BOOLEAN,
    progress=None,
    start_date=None,
    duration=90,
    category=Category.PERSONAL,
    status=Status.ACTIVE,
    target=None,
    comments=None,
    objective_id=None,
):
    start_date = start_date or date.today() - timedelta(days=10)
    return Objective(
        id=objective_id or name.lower(),
        user_id="u1",
        name=name,
        category=category,
        tracking_type=tracking_type,
        cadence=Cadence.DAILY,
        start_date=start_date,
        duration=duration,
        status=status,
        target=target,
        progress=Ledger(tracking_type, progress or {}),
        comments=CommentLedger(comments or {}),
    )
