"""Contact form endpoints.

``POST`` is public and has no authorization step, so the rate limit is the
first check applied to it.
"""

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_services, run_blocking
from app.core.auth import require_admin
from app.core.rate_limit import enforce_rate_limit
from app.core.validation import read_validated_body
from app.schemas.contact import ContactMessageCreate

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", status_code=201, dependencies=[Depends(enforce_rate_limit)])
async def submit_contact_message(request: Request) -> dict:
    payload = await read_validated_body(request, ContactMessageCreate)
    message = await run_blocking(get_services(request).contact.submit, payload)
    return {
        "message": "Message sent successfully! I will get back to you soon.",
        "id": message["id"],
    }


@router.get("", dependencies=[Depends(require_admin)])
async def list_contact_messages(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, description="Page size (max 100)."),
) -> dict:
    """List received messages, newest first (admin only)."""
    return get_services(request).contact.list(page=page, limit=limit).to_response()
