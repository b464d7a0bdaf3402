from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness probe.

    Returns:
        dict: ``status`` ("ok") and the configured storage backend.
    """

    return {"status": "ok", "storage": request.app.state.settings.storage.backend}
