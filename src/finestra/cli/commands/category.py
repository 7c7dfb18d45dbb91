"""Cost category management commands."""

import click
from finestra.domain.category import CategoryService
from finestra.domain.errors import DomainError
from finestra.cli.error_handling import handle_domain_error


@click.group()
def category_group():
    """Manage cost categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all cost categories."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(ctx.obj["user_id"])
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create the defaults.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"  {cat.name}")


@category_group.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a new cost category."""
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(ctx.obj["user_id"], name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name.strip()}' (ID: {category_id})")


@category_group.command("delete")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, name: str, yes: bool):
    """Delete a cost category. Items keep their category label."""
    service = CategoryService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete category '{name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(ctx.obj["user_id"], name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
