"""Admin session authentication.

Admins log in with email and password; on success the API sets a signed
session cookie (HS256 JWT) carrying the user's role. Mutating endpoints
check that cookie via the ``require_admin`` dependency.

Design principles:
- Single Responsibility: only issues and verifies sessions
- Dependency Injection: used via FastAPI Depends() for loose coupling
- Configuration-driven: secret and lifetime come from AUTH_* settings
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import bcrypt
import jwt
from fastapi import Request, Response

from app.core.config import AuthSettings
from app.core.errors import unauthorized

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Malformed hashes are treated as a mismatch.
    """

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def fingerprint(value: str) -> str:
    """Short stable hash used to correlate users in logs."""
    return hashlib.sha256(value.lower().encode()).hexdigest()[:16]


def create_session_token(
    user: dict[str, Any], cfg: AuthSettings, *, now: float | None = None
) -> str:
    """Issue a signed session token for ``user``.

    Args:
        user: Stored user document (needs ``id``, ``email`` and ``role``).
        cfg: Auth settings providing secret and lifetime.
        now: Issue time override (UNIX seconds), used in tests.

    Returns:
        Encoded JWT string.
    """
    issued_at = int(now if now is not None else time.time())
    claims = {
        "sub": user["id"],
        "email": user["email"],
        "role": user["role"],
        "iat": issued_at,
        "exp": issued_at + cfg.session_max_age_seconds,
    }
    return jwt.encode(claims, cfg.secret, algorithm=_ALGORITHM)


def decode_session_token(token: str, cfg: AuthSettings) -> dict[str, Any] | None:
    """Verify a session token.

    Returns:
        The token claims, or None if the token is invalid or expired.
    """

    try:
        return jwt.decode(token, cfg.secret, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("auth.session_expired")
        return None
    except jwt.InvalidTokenError as exc:
        logger.warning("auth.session_invalid", extra={"error_type": type(exc).__name__})
        return None


def get_session(request: Request) -> dict[str, Any] | None:
    """Return the session claims carried by the request cookie, if any."""

    cfg: AuthSettings = request.app.state.settings.auth
    token = request.cookies.get(cfg.cookie_name)
    if not token:
        return None
    return decode_session_token(token, cfg)


def is_admin(request: Request) -> bool:
    """Whether the caller holds a valid admin session."""

    session = get_session(request)
    return bool(session) and session.get("role") == ADMIN_ROLE


async def require_admin(request: Request) -> None:
    """FastAPI dependency restricting a route to admins.

    Usage:
        @router.post("/protected", dependencies=[Depends(require_admin)])

    Raises:
        UnauthorizedAppError: 401 when no valid admin session is present.
    """

    if is_admin(request):
        return

    logger.warning(
        "auth.unauthorized",
        extra={
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    raise unauthorized()


def set_session_cookie(response: Response, token: str, cfg: AuthSettings) -> None:
    response.set_cookie(
        key=cfg.cookie_name,
        value=token,
        max_age=cfg.session_max_age_seconds,
        httponly=True,
        secure=cfg.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, cfg: AuthSettings) -> None:
    response.delete_cookie(
        key=cfg.cookie_name,
        path="/",
        httponly=True,
        secure=cfg.cookie_secure,
        samesite="lax",
    )
