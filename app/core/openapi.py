"""OpenAPI metadata and customization utilities.

Enriches the generated OpenAPI schema with:
- Tags metadata for every router
- A cookie security scheme for the admin session, attached only to the
  operations that require it

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "Projects", "description": "Portfolio projects."},
    {"name": "Experience", "description": "Work history entries."},
    {"name": "Tech", "description": "Tech stack entries."},
    {"name": "Sections", "description": "Hero, about and contact copy."},
    {"name": "Contact", "description": "Public contact form and admin inbox."},
    {"name": "Auth", "description": "Admin login and session."},
    {"name": "Health", "description": "Liveness checks."},
]

_WRITE_METHODS = {"post", "put", "patch", "delete"}

# Operations reachable without an admin session
_PUBLIC_OPERATIONS = {
    ("/api/contact", "post"),
    ("/api/auth/login", "post"),
    ("/api/auth/logout", "post"),
}

# Reads that still need an admin session
_ADMIN_READS = {("/api/contact", "get")}


def requires_admin(path: str, method: str) -> bool:
    """Whether the operation sits behind the admin session check."""

    method = method.lower()
    if (path, method) in _ADMIN_READS:
        return True
    return method in _WRITE_METHODS and (path, method) not in _PUBLIC_OPERATIONS


def apply_openapi_customizations(app: FastAPI, *, cookie_name: str) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and session security.

    Args:
        app: Application whose schema is customized.
        cookie_name: Name of the session cookie documented in the scheme.
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminSession",
            {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_name,
                "description": "Session cookie set by POST /api/auth/login.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            for method, operation in methods.items():
                if isinstance(operation, dict) and requires_admin(path, method):
                    operation["security"] = [{"AdminSession": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
