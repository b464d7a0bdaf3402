"""Tech stack endpoints.

Single entries are addressed with the ``key`` query parameter
(``PATCH /api/tech?key=nextjs``).
"""

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import cached_response, get_services, run_blocking
from app.core import cache_tags
from app.core.auth import require_admin
from app.core.errors import ValidationAppError
from app.core.rate_limit import enforce_rate_limit
from app.core.validation import read_validated_body
from app.schemas.tech import TechCategory, TechCreate, TechUpdate

router = APIRouter(prefix="/api/tech", tags=["Tech"])

_write_gate = [Depends(require_admin), Depends(enforce_rate_limit)]


def _require_key(key: str | None) -> str:
    if not key:
        raise ValidationAppError(code="missing_key", message="Key parameter is required")
    return key


@router.get("")
async def list_tech(request: Request, category: TechCategory | None = Query(None)):
    services = get_services(request)
    return cached_response(
        request,
        tags=[cache_tags.TECH],
        build=lambda: {"data": services.tech.list(category=category)},
        s_maxage=600,
        stale_while_revalidate=120,
    )


@router.post("", status_code=201, dependencies=_write_gate)
async def create_tech(request: Request) -> dict:
    payload = await read_validated_body(request, TechCreate)
    data = payload.model_dump(mode="json", exclude_none=True)
    tech = await run_blocking(get_services(request).tech.create, data)
    return {"data": tech, "message": "Tech created successfully"}


@router.patch("", dependencies=_write_gate)
async def update_tech(request: Request, key: str | None = Query(None)) -> dict:
    key = _require_key(key)
    payload = await read_validated_body(request, TechUpdate)
    changes = payload.model_dump(mode="json", exclude_unset=True)
    tech = await run_blocking(get_services(request).tech.update, key, changes)
    return {"data": tech, "message": "Tech updated successfully"}


@router.delete("", dependencies=_write_gate)
async def delete_tech(request: Request, key: str | None = Query(None)) -> dict:
    await run_blocking(get_services(request).tech.delete, _require_key(key))
    return {"message": "Tech deleted successfully"}
