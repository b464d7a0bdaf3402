"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins APP_ENV to "testing" so no developer .env file leaks into the
settings, and builds a fresh application (limiter, store, cache) per test.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("AUTH_SECRET", "test-secret-for-session-tokens-0123456789")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.storage.in_memory import InMemoryDocumentStore
from app.core.app_factory import create_app
from app.core.auth import ADMIN_ROLE, create_session_token
from app.core.config import (
    AuthSettings,
    RateLimitSettings,
    Settings,
    StorageSettings,
)

ADMIN_USER = {"id": "admin-1", "email": "admin@example.com", "role": ADMIN_ROLE}
CLIENT_IP = "1.2.3.4"


def make_settings(
    *,
    max_requests: int = 3,
    window_ms: int = 60000,
    rate_limit_enabled: bool = True,
    **auth_overrides: Any,
) -> Settings:
    """Settings for one test app; cleanup sweeps are disabled for determinism."""
    return Settings(
        rate_limit=RateLimitSettings(
            enabled=rate_limit_enabled,
            max_requests=max_requests,
            window_ms=window_ms,
            cleanup_probability=0.0,
        ),
        auth=AuthSettings(secret="test-secret-for-session-tokens-0123456789", **auth_overrides),
        storage=StorageSettings(backend="memory"),
    )


@pytest.fixture
def app_factory() -> Callable[..., FastAPI]:
    """Build apps with custom limits, each with an empty in-memory store."""

    def _build(**kwargs: Any) -> FastAPI:
        return create_app(make_settings(**kwargs), store=InMemoryDocumentStore())

    return _build


@pytest.fixture
def app(app_factory) -> FastAPI:
    return app_factory()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Anonymous client; every request comes from CLIENT_IP."""
    return TestClient(app, headers={"x-forwarded-for": CLIENT_IP})


@pytest.fixture
def admin_token(app: FastAPI) -> str:
    return create_session_token(ADMIN_USER, app.state.settings.auth)


@pytest.fixture
def admin_client(app: FastAPI, admin_token: str) -> TestClient:
    """Client carrying a valid admin session cookie."""
    test_client = TestClient(app, headers={"x-forwarded-for": CLIENT_IP})
    test_client.cookies.set(app.state.settings.auth.cookie_name, admin_token)
    return test_client


@pytest.fixture
def project_payload() -> dict[str, Any]:
    return {
        "slug": "portfolio-api",
        "title": "Portfolio API",
        "summary": "Content API for a personal site",
        "description": "FastAPI service with admin CRUD and a contact form.",
        "stack": ["Python", "FastAPI"],
        "links": {"repo": "https://github.com/example/portfolio-api"},
        "featured": True,
        "order": 1,
    }


@pytest.fixture
def experience_payload() -> dict[str, Any]:
    return {
        "slug": "backend-engineer",
        "company": "Acme",
        "role": "Backend Engineer",
        "period": {"from": "2021-04"},
        "location": "Remote",
        "bullets": ["Built the billing service"],
        "stack": ["Python", "PostgreSQL"],
    }


@pytest.fixture
def tech_payload() -> dict[str, Any]:
    return {
        "key": "fastapi",
        "name": "FastAPI",
        "category": "backend",
        "website": "https://fastapi.tiangolo.com",
        "order": 2,
    }


@pytest.fixture
def contact_payload() -> dict[str, Any]:
    return {
        "name": "Jane Visitor",
        "email": "Jane@Example.com",
        "message": "Hello, I would like to talk about a project.",
    }
