"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Swap-friendly: storage backend can be replaced behind an abstract interface.
- Explicit ownership: the limiter lives on ``app.state`` and is built once
  per application, so every app (and every test) starts with empty state.

Rate limiting strategy:
- Fixed-window limit per client IP, taken from proxy headers.
- Clients whose IP cannot be determined share the ``"unknown"`` bucket.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Mapping

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import RateLimitSettings
from app.core.errors import too_many_requests

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def build_rate_limiter(cfg: RateLimitSettings) -> AbstractRateLimiter:
    """Create the limiter for one application instance."""

    return InMemoryFixedWindowRateLimiter(
        max_requests=cfg.max_requests,
        window_ms=cfg.window_ms,
        cleanup_probability=cfg.cleanup_probability,
    )


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Extract the client address from proxy headers.

    Priority: first entry of ``x-forwarded-for``, then ``x-real-ip``, then
    ``cf-connecting-ip``.

    Args:
        headers: Case-insensitive request headers.

    Returns:
        The client address, or ``"unknown"`` if no header is present.

    Examples:
        >>> get_client_ip({"x-forwarded-for": "1.2.3.4, 10.0.0.1"})
        '1.2.3.4'
        >>> get_client_ip({})
        'unknown'
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real = headers.get("x-real-ip")
    if real:
        return real.strip()

    cf_connecting = headers.get("cf-connecting-ip")
    if cf_connecting:
        return cf_connecting.strip()

    return UNKNOWN_CLIENT


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""

    return request.app.state.rate_limiter


def _hash_identifier(identifier: str) -> str:
    """Hash the client identifier for logging without exposing addresses."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]


def check_rate_limit(request: Request, *, scope: str | None = None) -> None:
    """Consume one request from the caller's quota.

    Args:
        request: Incoming request.
        scope: Optional bucket prefix so a route family gets its own quota
            (e.g. ``"login"``).

    Raises:
        RateLimitedAppError: When the caller is over quota.
    """
    cfg: RateLimitSettings = request.app.state.settings.rate_limit
    if not cfg.enabled:
        return

    limiter = get_rate_limiter(request)
    client_ip = get_client_ip(request.headers)
    identifier = f"{scope}:{client_ip}" if scope else client_ip

    if not limiter.is_rate_limited(identifier):
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": _hash_identifier(identifier),
                "scope": scope or "default",
                "remaining": limiter.remaining(identifier),
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": _hash_identifier(identifier),
            "client_known": client_ip != UNKNOWN_CLIENT,
            "scope": scope or "default",
            "limit": limiter.max_requests,
            "window_ms": limiter.window_ms,
            "retry_after_s": limiter.retry_after_seconds,
        },
    )
    raise too_many_requests(limiter.retry_after_seconds)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the per-client write quota.

    Usage:
        @router.post("/things", dependencies=[Depends(require_admin), Depends(enforce_rate_limit)])

    Raises:
        RateLimitedAppError: 429 Too Many Requests when the quota is exhausted.
    """

    check_rate_limit(request)


async def enforce_login_rate_limit(request: Request) -> None:
    """Rate limit login attempts in a bucket separate from content writes."""

    check_rate_limit(request, scope="login")
