import io
from datetime import timedelta

from openpyxl import load_workbook

from goaltrack.objectives.ledger import utc_today


def seed(client, headers):
    start = (utc_today() - timedelta(days=5)).isoformat()
    prayer = client.post(
        "/api/objectives",
        json={
            "name": "Fajr",
            "category": "spiritual",
            "tracking_type": "boolean",
            "cadence": "daily",
            "start_date": start,
        },
        headers=headers,
    ).json()["data"]
    run = client.post(
        "/api/objectives",
        json={
            "name": "Run",
            "category": "personal",
            "tracking_type": "numeric",
            "cadence": "daily",
            "target": 5,
            "start_date": start,
        },
        headers=headers,
    ).json()["data"]
    today = utc_today().isoformat()
    client.patch(f"/api/objectives/{prayer['id']}/progress", json={"date": today, "value": True}, headers=headers)
    client.patch(f"/api/objectives/{run['id']}/progress", json={"date": today, "value": 3.5}, headers=headers)
    client.patch(
        f"/api/objectives/{run['id']}/comment", json={"date": today, "comment": "windy"}, headers=headers
    )
    return prayer, run


def test_pdf_report(client, auth):
    _, headers = auth
    seed(client, headers)

    resp = client.get("/api/export/pdf?period=monthly", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="objectives.pdf"' in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_pdf_accepts_token_query_parameter(client, auth):
    _, headers = auth
    token = headers["Authorization"].split()[1]

    assert client.get(f"/api/export/pdf?token={token}").status_code == 200
    assert client.get("/api/export/pdf").status_code == 401
    assert client.get("/api/export/pdf?token=garbage").status_code == 401


def test_pdf_rejects_unknown_period_and_category(client, auth):
    _, headers = auth
    assert client.get("/api/export/pdf?period=yearly", headers=headers).status_code == 400
    assert client.get("/api/export/pdf?category=hobby", headers=headers).status_code == 400


def test_excel_workbook(client, auth):
    _, headers = auth
    seed(client, headers)

    resp = client.get("/api/export/excel", headers=headers)
    assert resp.status_code == 200
    assert 'filename="objectives.xlsx"' in resp.headers["content-disposition"]

    wb = load_workbook(io.BytesIO(resp.content))
    assert wb.sheetnames == ["Summary", "Spiritual Objectives", "Personal Objectives"]

    summary = [row for row in wb["Summary"].iter_rows(values_only=True)]
    assert summary[0] == ("Category", "Objective count", "Completion rate (7 days)")
    assert summary[1] == ("Spiritual Objectives", 1, "100.00%")

    personal = [row for row in wb["Personal Objectives"].iter_rows(values_only=True)]
    assert personal[0][:5] == ("Name", "Type", "Cadence", "Target", "Description")
    assert len(personal[0]) == 12
    assert personal[1][0] == "Run"
    assert personal[1][-1] == 3.5
    assert personal[1][-2] == "-"

    spiritual = [row for row in wb["Spiritual Objectives"].iter_rows(values_only=True)]
    assert spiritual[1][-1] == "Yes"


def test_excel_category_filter(client, auth):
    _, headers = auth
    seed(client, headers)
    wb = load_workbook(
        io.BytesIO(client.get("/api/export/excel?category=personal", headers=headers).content)
    )
    assert wb.sheetnames == ["Summary", "Personal Objectives"]


def test_template(client, auth):
    _, headers = auth
    seed(client, headers)

    for category in ("all", "spiritual", "finance"):
        resp = client.get(f"/api/export/template?category={category}", headers=headers)
        assert resp.status_code == 200
        assert 'filename="template-objectives.pdf"' in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")
