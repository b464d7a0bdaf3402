"""Page section endpoints (hero/about/contact)."""

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import cached_response, get_services, run_blocking
from app.core import cache_tags
from app.core.auth import require_admin
from app.core.errors import ValidationAppError
from app.core.rate_limit import enforce_rate_limit
from app.core.validation import read_validated_body
from app.schemas.section import SECTION_KEYS, SectionUpdate

router = APIRouter(prefix="/api/sections", tags=["Sections"])


@router.get("")
async def get_sections(request: Request, key: str | None = Query(None)):
    """Return every section, or the one named by ``key``."""
    services = get_services(request)
    if not key:
        return cached_response(
            request,
            tags=[cache_tags.SECTIONS],
            build=lambda: {"data": services.sections.list()},
            s_maxage=300,
            stale_while_revalidate=60,
        )

    if key not in SECTION_KEYS:
        raise ValidationAppError(
            code="invalid_section_key",
            message="Invalid section key. Must be hero, about, or contact",
        )

    return cached_response(
        request,
        tags=cache_tags.section_tags(key),
        build=lambda: {"data": services.sections.get(key)},
        s_maxage=300,
        stale_while_revalidate=60,
    )


@router.patch("", dependencies=[Depends(require_admin), Depends(enforce_rate_limit)])
async def update_section(request: Request) -> dict:
    """Update (or create) a section. The body names the section via ``key``."""
    payload = await read_validated_body(request, SectionUpdate)
    changes = payload.model_dump(exclude_unset=True)
    key = changes.pop("key")
    section = await run_blocking(get_services(request).sections.upsert, key, changes)
    return {"data": section, "message": "Section updated successfully"}
