"""Request body validation for mutating endpoints.

Bodies are parsed and validated inside the handler (not by FastAPI's
parameter binding) so that validation always runs after the authorization
and rate-limit dependencies have passed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.core.errors import IssueDetail, ValidationAppError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def issues_from_errors(
    errors: Iterable[Mapping[str, Any]], *, strip_location: bool = True
) -> list[IssueDetail]:
    """Convert pydantic error dicts into client-facing issue details.

    Args:
        errors: Output of ``ValidationError.errors()`` or
            ``RequestValidationError.errors()``.
        strip_location: Drop a leading ``body`` segment from the path.

    Returns:
        List of ``{"path", "message", "code"}`` dicts.
    """
    issues: list[IssueDetail] = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if strip_location and loc and loc[0] == "body":
            loc = loc[1:]
        issues.append(
            {
                "path": loc,
                "message": str(err.get("msg", "Invalid value")),
                "code": str(err.get("type", "invalid")),
            }
        )
    return issues


def validation_failed(issues: list[IssueDetail]) -> ValidationAppError:
    return ValidationAppError(
        code="validation_failed",
        message="Validation failed",
        details=issues,
    )


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate already-decoded data against a schema.

    Raises:
        ValidationAppError: With one issue per failing field.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        issues = issues_from_errors(exc.errors(include_url=False))
        logger.info(
            "validation.failed",
            extra={
                "schema": model.__name__,
                "issue_count": len(issues),
                "fields": [".".join(str(p) for p in i["path"]) for i in issues],
            },
        )
        raise validation_failed(issues) from exc


async def read_validated_body(request: Request, model: type[ModelT]) -> ModelT:
    """Read the JSON request body and validate it against ``model``.

    Args:
        request: Incoming request.
        model: Pydantic model describing the expected body.

    Returns:
        Validated model instance.

    Raises:
        ValidationAppError: If the body is not JSON or fails the schema.
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise validation_failed(
            [
                {
                    "path": [],
                    "message": "Request body must be valid JSON",
                    "code": "invalid_json",
                }
            ]
        ) from exc

    return validate_payload(model, data)
