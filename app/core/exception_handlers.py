"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes.

Design:
- AppError subclasses → the status they declare (400, 401, 404, 409, 429, 500)
- RequestValidationError (query/path params) → 400 with field details
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import AppError
from app.core.logging import get_request_id
from app.core.validation import issues_from_errors

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    The body always carries ``error`` (human-readable message). ``message``
    is added for errors with a follow-up hint and ``details`` when the error
    has structured context, e.g.::

        {"error": "Validation failed", "details": [...]}
        {"error": "Too many requests", "message": "Please wait ..."}

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the error's status code and headers.
    """
    status_code = exc.status_code
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    content: dict = {"error": exc.message}
    if exc.hint:
        content["message"] = exc.hint
    if exc.details is not None:
        content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=exc.headers or None,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map FastAPI's parameter validation errors to a 400 response.

    Request bodies are validated inside the handlers, so errors reaching
    this handler come from query or path parameters.
    """
    details = issues_from_errors(exc.errors(), strip_location=False)
    logger.warning(
        "query_validation_failed",
        extra={
            "request_path": request.url.path,
            "issue_count": len(details),
            "request_id": get_request_id(),
        },
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid query parameters", "details": details},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Catches any exception not handled by specific handlers.
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization, before route registration.
    Order matters: specific handlers registered before general fallback.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
