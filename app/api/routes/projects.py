"""Project endpoints.

Writes follow the request gate: admin session → rate limit → body
validation → persistence → cache invalidation.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import cached_response, get_services, run_blocking
from app.core import cache_tags
from app.core.auth import require_admin
from app.core.rate_limit import enforce_rate_limit
from app.core.validation import read_validated_body
from app.schemas.project import ProjectCreate, ProjectUpdate

router = APIRouter(prefix="/api/projects", tags=["Projects"])

_write_gate = [Depends(require_admin), Depends(enforce_rate_limit)]


@router.get("")
async def list_projects(
    request: Request,
    featured: Literal["true", "false"] | None = Query(None),
    stack: str | None = Query(None, description="Only projects using this technology."),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, description="Page size (max 50)."),
):
    """List projects ordered by ``order`` then publication date (newest first)."""
    services = get_services(request)
    return cached_response(
        request,
        tags=[cache_tags.PROJECTS],
        build=lambda: services.projects.list(
            featured=featured == "true", stack=stack, page=page, limit=limit
        ).to_response(),
        s_maxage=60,
        stale_while_revalidate=30,
    )


@router.get("/{slug}")
async def get_project(request: Request, slug: str):
    services = get_services(request)
    return cached_response(
        request,
        tags=cache_tags.project_tags(slug),
        build=lambda: {"data": services.projects.get(slug)},
        s_maxage=300,
        stale_while_revalidate=60,
    )


@router.post("", status_code=201, dependencies=_write_gate)
async def create_project(request: Request) -> dict:
    """Create a project (admin only). 409 if the slug is taken."""
    payload = await read_validated_body(request, ProjectCreate)
    data = payload.model_dump(mode="json", exclude_none=True)
    project = await run_blocking(get_services(request).projects.create, data)
    return {"data": project, "message": "Project created successfully"}


@router.patch("/{slug}", dependencies=_write_gate)
async def update_project(request: Request, slug: str) -> dict:
    """Partially update a project (admin only)."""
    payload = await read_validated_body(request, ProjectUpdate)
    changes = payload.model_dump(mode="json", exclude_unset=True)
    project = await run_blocking(get_services(request).projects.update, slug, changes)
    return {"data": project, "message": "Project updated successfully"}


@router.delete("/{slug}", dependencies=_write_gate)
async def delete_project(request: Request, slug: str) -> dict:
    await run_blocking(get_services(request).projects.delete, slug)
    return {"message": "Project deleted successfully"}
