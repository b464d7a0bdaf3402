"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses. Each error carries
the HTTP status it maps to; the translation to a JSON body lives in
``app.core.exception_handlers``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict


class IssueDetail(TypedDict):
    """A single field-level validation issue.

    ``path`` locates the offending field inside the request body (e.g.
    ``["links", "demo"]``); an empty path refers to the body as a whole.
    """

    path: list[str | int]
    message: str
    code: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message (rendered as ``error``).
        details: Optional structured details returned to the client.
        hint: Optional follow-up message (rendered as ``message``).
        headers: Extra response headers (e.g. ``Retry-After``).
    """

    code: str
    message: str
    details: list[IssueDetail] | dict[str, Any] | None = None
    hint: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    status_code = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input fails validation."""

    status_code = 400


class UnauthorizedAppError(AppError):
    """Raised when the caller lacks an admin session."""

    status_code = 401


class NotFoundAppError(AppError):
    """Raised when a referenced document does not exist."""

    status_code = 404


class ConflictAppError(AppError):
    """Raised when a create/update would reuse an existing unique key."""

    status_code = 409


class RateLimitedAppError(AppError):
    """Raised when the caller exceeded its request quota."""

    status_code = 429


class StorageAppError(AppError):
    """Raised when the document store cannot complete an operation."""

    status_code = 500


def unauthorized() -> UnauthorizedAppError:
    return UnauthorizedAppError(code="unauthorized", message="Unauthorized")


def too_many_requests(retry_after_seconds: int) -> RateLimitedAppError:
    return RateLimitedAppError(
        code="rate_limited",
        message="Too many requests",
        hint="Please wait a moment before trying again",
        headers={"Retry-After": str(retry_after_seconds)},
    )
