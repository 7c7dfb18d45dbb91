"""CLI helpers for project resolution."""

from __future__ import annotations

import click
from finestra.domain.errors import DomainError
from finestra.domain.project import ProjectService
from finestra.utils.project_resolver import resolve_project

from finestra.cli.error_handling import handle_domain_error


def resolve_project_or_exit(ctx: click.Context, project: str | None) -> str | None:
    """Resolve a project name or ID from the command line, or exit with an error.

    Returns None when no project was given.
    """
    if project is None:
        return None
    service = ProjectService(ctx.obj["db"])
    try:
        return resolve_project(service, ctx.obj["user_id"], project)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
