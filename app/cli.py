"""Maintenance commands for the portfolio content store.

Usage:
    python -m app.cli seed [--reset]
    python -m app.cli create-admin --email admin@example.com --password s3cretpass
    python -m app.cli generate-secret

Commands operate on the store selected by ``STORAGE_BACKEND`` /
``STORAGE_PATH`` (use the json backend, the memory store is discarded when
the command exits).
"""

from __future__ import annotations

import argparse
import logging
import secrets
import sys
from typing import Sequence

from app.adapters.storage.base import AbstractDocumentStore
from app.api.deps import Services
from app.core.app_factory import build_store
from app.core.config import Settings, settings
from app.core.logging import configure_logging
from app.core.validation import validate_payload
from app.schemas.experience import ExperienceCreate
from app.schemas.project import ProjectCreate
from app.schemas.section import SectionUpdate
from app.schemas.tech import TechCreate
from app.utils.tagged_cache import TaggedTTLCache

logger = logging.getLogger("app.cli")

SAMPLE_PROJECTS = [
    {
        "slug": "ai-saas-platform",
        "title": "AI-Powered SaaS Platform",
        "summary": "Multi-tenant SaaS platform with AI-assisted content generation",
        "description": "Subscription billing, team workspaces and an AI writing assistant.",
        "stack": ["Next.js", "TypeScript", "PostgreSQL", "Stripe"],
        "links": {"repo": "https://github.com/username/ai-saas-platform"},
        "featured": True,
        "order": 1,
        "published_at": "2024-01-15T00:00:00Z",
    },
    {
        "slug": "defi-dashboard",
        "title": "DeFi Analytics Dashboard",
        "summary": "Real-time cryptocurrency and DeFi protocol analytics dashboard",
        "description": "Tracks DeFi protocols and token prices across Ethereum, Polygon and BSC.",
        "stack": ["Next.js", "React", "Ethers.js", "PostgreSQL"],
        "links": {
            "demo": "https://defi-dashboard-demo.vercel.app",
            "repo": "https://github.com/username/defi-dashboard",
        },
        "featured": True,
        "order": 2,
        "published_at": "2023-11-20T00:00:00Z",
    },
    {
        "slug": "task-management-app",
        "title": "Collaborative Task Manager",
        "summary": "Team task management with real-time collaboration",
        "description": "Drag-and-drop boards with live updates over WebSockets.",
        "stack": ["Next.js", "TypeScript", "PostgreSQL", "Redis"],
        "links": {"demo": "https://task-manager-demo.vercel.app"},
        "featured": False,
        "order": 3,
        "published_at": "2023-08-10T00:00:00Z",
    },
]

SAMPLE_EXPERIENCE = [
    {
        "slug": "senior-fullstack-engineer",
        "company": "TechCorp Solutions",
        "role": "Senior Full-Stack Engineer",
        "period": {"from": "2022-06"},
        "location": "Remote",
        "bullets": [
            "Led development of microservices serving 100K+ daily active users",
            "Implemented a CI/CD pipeline reducing deployment time by 60%",
        ],
        "stack": ["Next.js", "TypeScript", "Node.js", "MongoDB"],
        "order": 1,
    },
    {
        "slug": "frontend-developer",
        "company": "Startup Inc",
        "role": "Frontend Developer",
        "period": {"from": "2020-03", "to": "2022-05"},
        "location": "Jakarta, Indonesia",
        "bullets": ["Built responsive web applications using React and Next.js"],
        "stack": ["React", "Next.js", "Tailwind CSS"],
        "order": 2,
    },
]

SAMPLE_TECH = [
    {"key": "nextjs", "name": "Next.js", "category": "frontend", "website": "https://nextjs.org", "order": 1},
    {"key": "react", "name": "React", "category": "frontend", "website": "https://react.dev", "order": 2},
    {"key": "nodejs", "name": "Node.js", "category": "backend", "website": "https://nodejs.org", "order": 1},
    {"key": "postgresql", "name": "PostgreSQL", "category": "database", "website": "https://postgresql.org", "order": 1},
    {"key": "typescript", "name": "TypeScript", "category": "language", "website": "https://typescriptlang.org", "order": 1},
    {"key": "git", "name": "Git", "category": "tool", "website": "https://git-scm.com", "order": 1},
]

SAMPLE_SECTIONS = [
    {
        "key": "hero",
        "title": "Hi, I'm a Full-Stack Engineer",
        "subtitle": "I build fast, accessible web applications.",
    },
    {
        "key": "about",
        "title": "About me",
        "body": "Engineer focused on web platforms, developer tooling and Web3.",
    },
    {
        "key": "contact",
        "title": "Get in touch",
        "body": "Have a project in mind? Send me a message.",
    },
]

SEEDED_COLLECTIONS = ("projects", "experience", "tech", "sections")


def _services(store: AbstractDocumentStore) -> Services:
    return Services.build(store, TaggedTTLCache())


def seed(store: AbstractDocumentStore, *, reset: bool = False) -> dict[str, int]:
    """Insert the sample content, skipping entries whose key already exists.

    Args:
        store: Target document store.
        reset: Empty the content collections first.

    Returns:
        Number of inserted documents per collection.
    """
    if reset:
        for collection in SEEDED_COLLECTIONS:
            store.clear(collection)

    services = _services(store)
    inserted = {name: 0 for name in SEEDED_COLLECTIONS}

    for raw in SAMPLE_PROJECTS:
        if store.find_one("projects", "slug", raw["slug"]) is None:
            payload = validate_payload(ProjectCreate, raw)
            services.projects.create(payload.model_dump(mode="json", exclude_none=True))
            inserted["projects"] += 1

    for raw in SAMPLE_EXPERIENCE:
        if store.find_one("experience", "slug", raw["slug"]) is None:
            payload = validate_payload(ExperienceCreate, raw)
            services.experience.create(
                payload.model_dump(mode="json", by_alias=True, exclude_none=True)
            )
            inserted["experience"] += 1

    for raw in SAMPLE_TECH:
        if store.find_one("tech", "key", raw["key"]) is None:
            payload = validate_payload(TechCreate, raw)
            services.tech.create(payload.model_dump(mode="json", exclude_none=True))
            inserted["tech"] += 1

    for raw in SAMPLE_SECTIONS:
        if store.find_one("sections", "key", raw["key"]) is None:
            changes = validate_payload(SectionUpdate, raw).model_dump(exclude_unset=True)
            services.sections.upsert(changes.pop("key"), changes)
            inserted["sections"] += 1

    logger.info("cli.seeded", extra=inserted)
    return inserted


def create_admin(store: AbstractDocumentStore, email: str, password: str) -> str:
    """Create (or reset) an admin account and return its id."""
    return _services(store).users.create_admin(email, password)["id"]


def generate_secret(nbytes: int = 48) -> str:
    """Random value suitable for ``AUTH_SECRET``."""
    return secrets.token_urlsafe(nbytes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.cli", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    seed_cmd = sub.add_parser("seed", help="Insert sample portfolio content")
    seed_cmd.add_argument("--reset", action="store_true", help="Empty content collections first")

    admin_cmd = sub.add_parser("create-admin", help="Create or reset an admin account")
    admin_cmd.add_argument("--email", required=True)
    admin_cmd.add_argument("--password", required=True)

    sub.add_parser("generate-secret", help="Print a random session signing secret")
    return parser


def main(argv: Sequence[str] | None = None, *, cfg: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = cfg or settings

    if args.command == "generate-secret":
        print(generate_secret())
        return 0

    configure_logging(cfg.log, debug=cfg.app.debug)
    if cfg.storage.backend.lower() == "memory":
        logger.warning("cli.memory_backend", extra={"command": args.command})

    store = build_store(cfg.storage)
    if args.command == "seed":
        counts = seed(store, reset=args.reset)
        for collection, count in counts.items():
            print(f"{collection}: {count} inserted")
        if cfg.auth.admin_email and cfg.auth.admin_password:
            _services(store).users.ensure_admin(cfg.auth.admin_email, cfg.auth.admin_password)
            print("admin: ensured")
        return 0

    if len(args.password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        return 2
    user_id = create_admin(store, args.email, args.password)
    print(f"ADMIN_ID: {user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
