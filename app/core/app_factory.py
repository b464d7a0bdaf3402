"""Application factory for FastAPI app.

Centralizes app construction (settings, owned state, middleware, handlers,
routers) so every application instance, and every test, gets its own rate
limiter, document store and cache.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI

from app.adapters.storage.base import AbstractDocumentStore
from app.adapters.storage.in_memory import InMemoryDocumentStore
from app.adapters.storage.json_file import JsonFileDocumentStore
from app.api.deps import Services
from app.api.routes import (
    auth_router,
    contact_router,
    experience_router,
    health_router,
    projects_router,
    sections_router,
    tech_router,
)
from app.core.config import PROJECT_ROOT, Settings, StorageSettings, settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_rate_limiter
from app.utils.tagged_cache import TaggedTTLCache

logger = logging.getLogger(__name__)


def build_store(cfg: StorageSettings) -> AbstractDocumentStore:
    """Create the document store selected by ``STORAGE_BACKEND``.

    Raises:
        ValueError: For an unknown backend name.
    """
    backend = cfg.backend.lower()
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "json":
        path = Path(cfg.path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return JsonFileDocumentStore(str(path))
    raise ValueError(f"Unknown storage backend: {cfg.backend!r} (expected 'memory' or 'json')")


def create_app(
    app_settings: Settings | None = None,
    *,
    store: AbstractDocumentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the environment-derived
            global ``settings``.
        store: Pre-built document store (tests, CLI); built from settings
            when omitted.

    Returns:
        Configured FastAPI app with state, middleware, handlers and routers.
    """
    cfg = app_settings or settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log, debug=cfg.app.debug)

    app = FastAPI(
        title=cfg.app.name,
        description=(
            "Content API for a personal portfolio: public read endpoints for "
            "projects, experience, tech stack and page sections, an admin-only "
            "CRUD surface behind a session cookie, and a rate-limited contact form."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # Owned state
    document_store = store or build_store(cfg.storage)
    cache = TaggedTTLCache(
        ttl_seconds=cfg.cache.ttl_seconds,
        max_entries=cfg.cache.max_entries,
    )
    app.state.settings = cfg
    app.state.store = document_store
    app.state.cache = cache
    app.state.rate_limiter = build_rate_limiter(cfg.rate_limit)
    app.state.services = Services.build(document_store, cache)

    if cfg.auth.admin_email and cfg.auth.admin_password:
        app.state.services.users.ensure_admin(cfg.auth.admin_email, cfg.auth.admin_password)

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    for router in (
        projects_router,
        experience_router,
        tech_router,
        sections_router,
        contact_router,
        auth_router,
        health_router,
    ):
        app.include_router(router)

    # OpenAPI customizations (security scheme, tags)
    apply_openapi_customizations(app, cookie_name=cfg.auth.cookie_name)

    logger.info(
        "app.started",
        extra={
            "app_env": cfg.app_env,
            "storage_backend": cfg.storage.backend,
            "rate_limit_enabled": cfg.rate_limit.enabled,
            "rate_limit_max": cfg.rate_limit.max_requests,
            "rate_limit_window_ms": cfg.rate_limit.window_ms,
        },
    )
    return app
