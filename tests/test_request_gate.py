"""Ordering of the checks on mutating endpoints.

Admin writes run: session check, rate limit, body validation, persistence,
cache invalidation. Each step must stop the request before any later step
is reached.
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.auth import create_session_token

WRITE_REQUESTS = [
    ("post", "/api/projects"),
    ("patch", "/api/projects/portfolio-api"),
    ("delete", "/api/projects/portfolio-api"),
    ("post", "/api/experience"),
    ("patch", "/api/experience/backend-engineer"),
    ("delete", "/api/experience/backend-engineer"),
    ("post", "/api/tech"),
    ("patch", "/api/tech?key=fastapi"),
    ("delete", "/api/tech?key=fastapi"),
    ("patch", "/api/sections"),
]


class TestAuthorizationStep:
    """No valid session: 401 before the limiter or the store is touched."""

    @pytest.mark.parametrize("method,url", WRITE_REQUESTS)
    def test_unauthenticated_write_is_rejected_first(
        self, app: FastAPI, client: TestClient, method: str, url: str
    ) -> None:
        limiter = app.state.rate_limiter
        store = app.state.store

        with patch.object(limiter, "is_rate_limited", wraps=limiter.is_rate_limited) as limiter_spy, \
             patch.object(store, "insert", wraps=store.insert) as insert_spy, \
             patch.object(store, "update", wraps=store.update) as update_spy, \
             patch.object(store, "delete", wraps=store.delete) as delete_spy, \
             patch.object(store, "find_one", wraps=store.find_one) as find_spy:
            resp = client.request(method, url, content=b"{not json")

        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}
        limiter_spy.assert_not_called()
        insert_spy.assert_not_called()
        update_spy.assert_not_called()
        delete_spy.assert_not_called()
        find_spy.assert_not_called()

    def test_unauthenticated_requests_do_not_consume_quota(
        self, app: FastAPI, client: TestClient, project_payload: dict
    ) -> None:
        for _ in range(10):
            assert client.post("/api/projects", json=project_payload).status_code == 401

        assert len(app.state.rate_limiter) == 0

    def test_non_admin_role_is_rejected(self, app: FastAPI, project_payload: dict) -> None:
        token = create_session_token(
            {"id": "u-1", "email": "viewer@example.com", "role": "viewer"},
            app.state.settings.auth,
        )
        viewer = TestClient(app, headers={"x-forwarded-for": "1.2.3.4"})
        viewer.cookies.set(app.state.settings.auth.cookie_name, token)

        resp = viewer.post("/api/projects", json=project_payload)

        assert resp.status_code == 401

    def test_expired_session_is_rejected(self, app: FastAPI, project_payload: dict) -> None:
        cfg = app.state.settings.auth
        token = create_session_token(
            {"id": "admin-1", "email": "admin@example.com", "role": "admin"},
            cfg,
            now=1_000_000.0,
        )
        stale = TestClient(app)
        stale.cookies.set(cfg.cookie_name, token)

        assert stale.post("/api/projects", json=project_payload).status_code == 401

    def test_token_signed_with_other_secret_is_rejected(
        self, app: FastAPI, project_payload: dict
    ) -> None:
        cfg = app.state.settings.auth
        forged = create_session_token(
            {"id": "admin-1", "email": "admin@example.com", "role": "admin"},
            cfg.model_copy(update={"secret": "another-secret-entirely-0123456789"}),
        )
        attacker = TestClient(app)
        attacker.cookies.set(cfg.cookie_name, forged)

        assert attacker.post("/api/projects", json=project_payload).status_code == 401


class TestRateLimitStep:
    """Authorized callers are limited before their body is looked at."""

    def test_over_quota_admin_gets_429_even_with_bad_body(
        self, admin_client: TestClient, project_payload: dict
    ) -> None:
        for index in range(3):
            payload = {**project_payload, "slug": f"project-{index}"}
            assert admin_client.post("/api/projects", json=payload).status_code == 201

        resp = admin_client.post("/api/projects", content=b"{not json")

        assert resp.status_code == 429
        assert resp.headers["Retry-After"] == "60"

    def test_missing_tech_key_counts_against_quota(self, app: FastAPI, admin_client: TestClient) -> None:
        resp = admin_client.delete("/api/tech")

        assert resp.status_code == 400
        assert resp.json() == {"error": "Key parameter is required"}
        assert app.state.rate_limiter.get_record("1.2.3.4").count == 1

    def test_reads_are_not_rate_limited(self, client: TestClient) -> None:
        for _ in range(10):
            assert client.get("/api/projects").status_code == 200


class TestValidationStep:
    """Authorized, within quota, malformed body: 400 and no persistence."""

    def test_malformed_body_never_reaches_store(
        self, app: FastAPI, admin_client: TestClient
    ) -> None:
        store = app.state.store
        with patch.object(store, "insert", wraps=store.insert) as insert_spy, \
             patch.object(store, "find_one", wraps=store.find_one) as find_spy:
            resp = admin_client.post(
                "/api/projects",
                json={"slug": "Not A Slug", "title": "", "stack": []},
            )

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Validation failed"
        assert len(body["details"]) >= 1
        insert_spy.assert_not_called()
        find_spy.assert_not_called()

    def test_details_locate_offending_fields(self, admin_client: TestClient, project_payload: dict) -> None:
        payload = {**project_payload, "links": {"demo": "not a url"}}

        resp = admin_client.post("/api/projects", json=payload)

        paths = [detail["path"] for detail in resp.json()["details"]]
        assert resp.status_code == 400
        assert any(path[:2] == ["links", "demo"] for path in paths)
        for detail in resp.json()["details"]:
            assert set(detail) == {"path", "message", "code"}

    def test_invalid_json_is_a_validation_failure(self, admin_client: TestClient) -> None:
        resp = admin_client.post(
            "/api/projects",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json()["details"][0]["code"] == "invalid_json"

    def test_empty_body_is_a_validation_failure(self, admin_client: TestClient) -> None:
        resp = admin_client.post("/api/projects")

        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation failed"

    def test_validation_failure_consumes_quota(self, app: FastAPI, admin_client: TestClient) -> None:
        admin_client.post("/api/projects", json={})

        assert app.state.rate_limiter.get_record("1.2.3.4").count == 1


class TestPersistenceAndInvalidation:
    """Successful writes invalidate the collection and item cache tags."""

    def test_create_invalidates_collection_and_item_tags(
        self, app: FastAPI, admin_client: TestClient, project_payload: dict
    ) -> None:
        cache = app.state.cache
        with patch.object(cache, "invalidate_tags", wraps=cache.invalidate_tags) as spy:
            resp = admin_client.post("/api/projects", json=project_payload)

        assert resp.status_code == 201
        spy.assert_called_once_with(["projects", "project-portfolio-api"])

    def test_conflict_does_not_invalidate(
        self, app: FastAPI, admin_client: TestClient, project_payload: dict
    ) -> None:
        admin_client.post("/api/projects", json=project_payload)
        cache = app.state.cache

        with patch.object(cache, "invalidate_tags", wraps=cache.invalidate_tags) as spy:
            resp = admin_client.post("/api/projects", json=project_payload)

        assert resp.status_code == 409
        spy.assert_not_called()

    def test_missing_document_does_not_invalidate(self, app: FastAPI, admin_client: TestClient) -> None:
        cache = app.state.cache

        with patch.object(cache, "invalidate_tags", wraps=cache.invalidate_tags) as spy:
            resp = admin_client.delete("/api/projects/does-not-exist")

        assert resp.status_code == 404
        spy.assert_not_called()
