"""Work experience endpoints."""

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import cached_response, get_services, run_blocking
from app.core import cache_tags
from app.core.auth import require_admin
from app.core.rate_limit import enforce_rate_limit
from app.core.validation import read_validated_body
from app.schemas.experience import ExperienceCreate, ExperienceUpdate

router = APIRouter(prefix="/api/experience", tags=["Experience"])

_write_gate = [Depends(require_admin), Depends(enforce_rate_limit)]


@router.get("")
async def list_experience(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, description="Page size (max 50)."),
):
    services = get_services(request)
    return cached_response(
        request,
        tags=[cache_tags.EXPERIENCE],
        build=lambda: services.experience.list(page=page, limit=limit).to_response(),
        s_maxage=120,
        stale_while_revalidate=60,
    )


@router.get("/{slug}")
async def get_experience(request: Request, slug: str):
    services = get_services(request)
    return cached_response(
        request,
        tags=cache_tags.experience_tags(slug),
        build=lambda: {"data": services.experience.get(slug)},
        s_maxage=300,
        stale_while_revalidate=60,
    )


@router.post("", status_code=201, dependencies=_write_gate)
async def create_experience(request: Request) -> dict:
    payload = await read_validated_body(request, ExperienceCreate)
    data = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    experience = await run_blocking(get_services(request).experience.create, data)
    return {"data": experience, "message": "Experience created successfully"}


@router.patch("/{slug}", dependencies=_write_gate)
async def update_experience(request: Request, slug: str) -> dict:
    payload = await read_validated_body(request, ExperienceUpdate)
    changes = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    experience = await run_blocking(get_services(request).experience.update, slug, changes)
    return {"data": experience, "message": "Experience updated successfully"}


@router.delete("/{slug}", dependencies=_write_gate)
async def delete_experience(request: Request, slug: str) -> dict:
    await run_blocking(get_services(request).experience.delete, slug)
    return {"message": "Experience deleted successfully"}
