"""Route tests for the public contact form and the admin inbox."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


def test_submission_is_stored_normalized(app: FastAPI, client: TestClient, contact_payload: dict) -> None:
    payload = {**contact_payload, "name": "  Jane Visitor  "}

    resp = client.post("/api/contact", json=payload)

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Message sent successfully! I will get back to you soon."
    stored = app.state.store.find_one("contact_messages", "id", body["id"])
    assert stored["name"] == "Jane Visitor"
    assert stored["email"] == "jane@example.com"
    assert stored["created_at"]


@pytest.mark.parametrize(
    "field,value",
    [
        ("name", "J"),
        ("name", "x" * 101),
        ("email", "not-an-email"),
        ("email", ("a" * 190) + "@example.com"),
        ("message", "too short"),
        ("message", "x" * 2001),
    ],
)
def test_invalid_fields_are_rejected(
    client: TestClient, contact_payload: dict, field: str, value: str
) -> None:
    resp = client.post("/api/contact", json={**contact_payload, field: value})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["path"] == [field]


def test_submission_invalidates_contact_tag(app: FastAPI, client: TestClient, contact_payload: dict) -> None:
    app.state.cache.set("inbox", {"cached": True}, tags=["contact"])

    client.post("/api/contact", json=contact_payload)

    assert app.state.cache.get("inbox") is None


def test_inbox_requires_admin(client: TestClient) -> None:
    resp = client.get("/api/contact")

    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


def test_inbox_lists_messages_for_admin(
    client: TestClient, admin_client: TestClient, contact_payload: dict
) -> None:
    client.post("/api/contact", json=contact_payload)
    client.post("/api/contact", json={**contact_payload, "email": "second@example.com"})

    resp = admin_client.get("/api/contact", params={"limit": 1})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}


def test_inbox_limit_is_capped(admin_client: TestClient) -> None:
    body = admin_client.get("/api/contact", params={"limit": 1000}).json()

    assert body["pagination"]["limit"] == 100
