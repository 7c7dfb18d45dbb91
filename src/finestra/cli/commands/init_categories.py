"""Initialize default cost categories."""

import click
from finestra.domain.category import CategoryService
from finestra.domain.errors import DomainError
from finestra.cli.error_handling import handle_domain_error


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the default cost categories the user does not have yet."""
    service = CategoryService(ctx.obj["db"])

    try:
        created = service.seed_defaults(ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not created:
        click.echo("Default categories already exist.")
        return
    click.echo(f"Created {len(created)} categories: {', '.join(created)}")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
