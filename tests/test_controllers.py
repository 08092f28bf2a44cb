from __future__ import annotations

import pytest

from src.workboard.workboard.main import create_app


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app()
    return app.test_client()


def _login(client):
    resp = client.post("/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return resp


def test_api_requires_login(client):
    assert client.get("/api/workers").status_code == 401
    assert client.get("/session").get_json() == {"authenticated": False, "username": None}

    bad = client.post("/login", json={"username": "admin", "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid username or password"

    _login(client)
    assert client.get("/session").get_json()["authenticated"] is True

    client.post("/logout")
    assert client.get("/api/workers").status_code == 401


def test_worker_ledger_flow(client):
    _login(client)

    created = client.post("/api/workers", json={"id": "W1", "name": "Alice", "jobRole": "Mason"})
    assert created.status_code == 201
    assert created.get_json()["data"]["id"] == "W1"

    dup = client.post("/api/workers", json={"id": "W1", "name": "Bob", "jobRole": "Painter"})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "DuplicateId"

    assert client.post("/api/works", json={"workerId": "W1", "date": "01/03/2024", "workType": "Plastering", "earnedAmount": "3000"}).status_code == 201
    assert client.post("/api/works", json={"workerId": "W1", "date": "02/03/2024", "workType": "Bricks", "earnedAmount": 2000}).status_code == 201
    pay = client.post("/api/payments", json={"workerId": "W1", "date": "05/03/2024", "amount": "2000", "paymentType": "Cash"})
    assert pay.status_code == 201

    zero = client.post("/api/payments", json={"workerId": "W1", "date": "05/03/2024", "amount": 0, "paymentType": "Cash"})
    assert zero.status_code == 400
    assert zero.get_json()["message"] == "Payment amount must be greater than 0"

    ghost = client.post("/api/works", json={"workerId": "ghost", "date": "01/03/2024", "workType": "x", "earnedAmount": "1"})
    assert ghost.status_code == 404

    worker = client.get("/api/workers/W1").get_json()
    assert (worker["totalEarned"], worker["totalPaid"], worker["balance"]) == ("5000", "2000", "3000")

    payment_id = pay.get_json()["data"]["id"]
    assert client.get(f"/api/payments/{payment_id}").get_json()["displayDate"] == "05/03/2024"
    assert len(client.get("/api/works?workerId=W1").get_json()) == 2

    renamed = client.put("/api/workers/W1", json={"id": "W2"})
    assert renamed.status_code == 200
    assert client.get("/api/workers/W1").status_code == 404

    ledger = client.get("/api/workers/W2/ledger").get_json()
    assert ledger["balance"] == "3000"
    assert len(ledger["workRecords"]) == 2

    deleted = client.delete("/api/workers/W2")
    assert deleted.status_code == 200
    assert client.get("/api/works").get_json() == []
    assert client.get("/api/payments").get_json() == []


def test_pdf_downloads(client):
    _login(client)
    assert client.get("/api/reports/workers.pdf").status_code == 404

    client.post("/api/workers", json={"id": "W1", "name": "Alice Perera", "jobRole": "Mason"})
    client.post("/api/works", json={"workerId": "W1", "date": "01/03/2024", "workType": "Plastering", "earnedAmount": "3000"})

    one = client.get("/api/reports/workers/W1.pdf")
    assert one.status_code == 200
    assert one.mimetype == "application/pdf"
    assert "Worker_W1_Alice_Perera.pdf" in one.headers["Content-Disposition"]
    assert one.data.startswith(b"%PDF")

    everyone = client.get("/api/reports/workers.pdf")
    assert everyone.status_code == 200
    assert "All_Workers_Report_" in everyone.headers["Content-Disposition"]

    assert client.get("/api/reports/workers/ghost.pdf").status_code == 404
