"""Per-application service container and request helpers.

Services, store, cache and limiter are built once in ``create_app`` and
stored on ``app.state``; handlers reach them through the request so no
module-level state is shared between application instances.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

from app.adapters.storage.base import AbstractDocumentStore
from app.services.contact_service import ContactService
from app.services.content_service import ExperienceService, ProjectService, TechService
from app.services.section_service import SectionService
from app.services.user_service import UserService
from app.utils.tagged_cache import TaggedTTLCache


@dataclass
class Services:
    projects: ProjectService
    experience: ExperienceService
    tech: TechService
    sections: SectionService
    contact: ContactService
    users: UserService

    @classmethod
    def build(cls, store: AbstractDocumentStore, cache: TaggedTTLCache) -> "Services":
        return cls(
            projects=ProjectService(store, cache),
            experience=ExperienceService(store, cache),
            tech=TechService(store, cache),
            sections=SectionService(store, cache),
            contact=ContactService(store, cache),
            users=UserService(store),
        )


def get_services(request: Request) -> Services:
    return request.app.state.services


ResultT = TypeVar("ResultT")


async def run_blocking(func: Callable[..., ResultT], *args: Any, **kwargs: Any) -> ResultT:
    """Run a blocking call (bcrypt, JSON-file store writes) on the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


def _cache_key(request: Request) -> str:
    query = "&".join(f"{k}={v}" for k, v in sorted(request.query_params.multi_items()))
    return f"{request.url.path}?{query}"


def cached_response(
    request: Request,
    *,
    tags: Iterable[str],
    build: Callable[[], Any],
    s_maxage: int,
    stale_while_revalidate: int,
) -> JSONResponse:
    """Serve a public read through the tagged cache.

    Args:
        request: Incoming request (path + query form the cache key).
        tags: Cache tags the payload depends on.
        build: Produces the payload on a cache miss.
        s_maxage: Shared-cache lifetime advertised in ``Cache-Control``.
        stale_while_revalidate: Grace period advertised in ``Cache-Control``.

    Returns:
        JSON response with ``Cache-Control`` set.
    """
    cache: TaggedTTLCache = request.app.state.cache
    enabled = request.app.state.settings.cache.enabled
    key = _cache_key(request)

    payload = cache.get(key) if enabled else None
    if payload is None:
        payload = build()
        if enabled:
            cache.set(key, payload, tags)

    return JSONResponse(
        content=payload,
        headers={
            "Cache-Control": (
                f"public, s-maxage={s_maxage}, "
                f"stale-while-revalidate={stale_while_revalidate}"
            )
        },
    )
