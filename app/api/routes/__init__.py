from __future__ import annotations

from app.api.routes.auth import router as auth_router
from app.api.routes.contact import router as contact_router
from app.api.routes.experience import router as experience_router
from app.api.routes.health import router as health_router
from app.api.routes.projects import router as projects_router
from app.api.routes.sections import router as sections_router
from app.api.routes.tech import router as tech_router

__all__ = [
    "auth_router",
    "contact_router",
    "experience_router",
    "health_router",
    "projects_router",
    "sections_router",
    "tech_router",
]
