from __future__ import annotations

from fastapi.testclient import TestClient

from app.main import app as default_app


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert isinstance(generated, str)
    assert len(generated) > 0

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None


def test_error_responses_carry_request_id(client: TestClient):
    resp = client.post("/api/projects", json={}, headers={"X-Request-ID": "gate-1"})

    assert resp.status_code == 401
    assert resp.headers.get("X-Request-ID") == "gate-1"


def test_module_level_app_serves_requests():
    resp = TestClient(default_app).get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
