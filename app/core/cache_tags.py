"""Cache tags for public read payloads.

Collection tags cover list endpoints; item tags cover single-document
endpoints. Mutations invalidate the collection tag plus the item tag of the
affected document.
"""

from __future__ import annotations

PROJECTS = "projects"
EXPERIENCE = "experience"
TECH = "tech"
SECTIONS = "sections"
CONTACT = "contact"


def project_detail(slug: str) -> str:
    return f"project-{slug}"


def experience_detail(slug: str) -> str:
    return f"experience-{slug}"


def section_detail(key: str) -> str:
    return f"section-{key}"


def project_tags(slug: str | None = None) -> list[str]:
    """Tags to invalidate after a project mutation.

    Examples:
        >>> project_tags("my-app")
        ['projects', 'project-my-app']
        >>> project_tags()
        ['projects']
    """
    tags = [PROJECTS]
    if slug:
        tags.append(project_detail(slug))
    return tags


def experience_tags(slug: str | None = None) -> list[str]:
    tags = [EXPERIENCE]
    if slug:
        tags.append(experience_detail(slug))
    return tags


def section_tags(key: str | None = None) -> list[str]:
    tags = [SECTIONS]
    if key:
        tags.append(section_detail(key))
    return tags
