"""Utility for resolving project names to IDs."""

from finestra.domain.errors import NotFoundError, ValidationError
from finestra.domain.project import ProjectService

MIN_PREFIX_LENGTH = 4


def resolve_project(project_service: ProjectService, user_id: str, project: str) -> str:
    """Resolve a project ID, ID prefix or name to a project ID.

    Args:
        project_service: ProjectService instance
        user_id: Owner
        project: Full ID, an ID prefix of at least four characters, or the
            exact project name (case-insensitive)

    Returns:
        Project ID

    Raises:
        NotFoundError: If nothing matches
        ValidationError: If the value matches several projects
    """
    value = project.strip()
    if project_service.get_project(user_id, value) is not None:
        return value

    projects = project_service.list_projects(user_id)

    by_name = [p for p in projects if p.name.lower() == value.lower()]
    if len(by_name) == 1:
        return by_name[0].id
    if len(by_name) > 1:
        raise ValidationError(
            f"Project name '{project}' is ambiguous; use one of: "
            + ", ".join(p.id for p in by_name)
        )

    if len(value) >= MIN_PREFIX_LENGTH:
        by_prefix = [p for p in projects if p.id.startswith(value)]
        if len(by_prefix) == 1:
            return by_prefix[0].id
        if len(by_prefix) > 1:
            raise ValidationError(f"Project ID prefix '{project}' is ambiguous")

    raise NotFoundError(f"Project '{project}' not found")
