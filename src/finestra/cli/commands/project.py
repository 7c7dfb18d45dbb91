"""Project management commands."""

from datetime import date

import click
from finestra.domain.cost import CostService
from finestra.domain.entities import ProjectStatus
from finestra.domain.errors import DomainError
from finestra.domain.metrics import progress_percentage
from finestra.domain.project import ProjectService
from finestra.domain.revenue import RevenueService
from finestra.domain.status import cost_deviation, cost_status, revenue_status
from finestra.cli.error_handling import handle_domain_error
from finestra.cli.formatting import format_deviation, format_money, format_percentage, truncate
from finestra.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from finestra.cli.project_resolution import resolve_project_or_exit

STATUS_CHOICES = [status.value for status in ProjectStatus]


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name")
@click.option("--client", required=True, help="Client name")
@click.option("--start-date", default="today", show_default=True, help="Start date (YYYY-MM-DD or relative)")
@click.option("--revenue", "planned_revenue", required=True, help="Planned total revenue (e.g., 15000.00)")
@click.option("--cost", "planned_cost", required=True, help="Planned total cost (e.g., 9000.00)")
@click.option(
    "--status",
    type=click.Choice(STATUS_CHOICES),
    default=ProjectStatus.PENDENTE.value,
    show_default=True,
    help="Project status",
)
@click.option("--description", help="Project description")
@click.pass_context
def create_project(
    ctx,
    name: str,
    client: str,
    start_date: str,
    planned_revenue: str,
    planned_cost: str,
    status: str,
    description: str | None,
):
    """Create a new project.

    Examples:
        finestra project create "Casa Verde" --client "Ana" --revenue 15000 --cost 9000
        finestra project create "Loja" --client "ACME" --start-date 2024-07-01 --revenue 8000 --cost 5000 --status "Em andamento"
    """
    service = ProjectService(ctx.obj["db"])

    try:
        project_id = service.create_project(
            user_id=ctx.obj["user_id"],
            name=name,
            client=client,
            start_date=parse_date_or_exit(ctx, start_date, "start date"),
            planned_total_revenue=parse_amount_or_exit(ctx, planned_revenue, "revenue"),
            planned_total_cost=parse_amount_or_exit(ctx, planned_cost, "cost"),
            status=ProjectStatus(status),
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id})")


@project_group.command("list")
@click.option("--search", help="Only projects whose name or client contains this text")
@click.pass_context
def list_projects(ctx, search: str | None):
    """List projects, most recent start first."""
    service = ProjectService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]

    if search is not None:
        projects = service.search_projects(user_id, search)
    else:
        projects = service.list_projects(user_id)

    if not projects:
        click.echo("No projects found.")
        return

    click.echo(f"\nFound {len(projects)} project(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<32} {'Name':<24} {'Client':<18} {'Start':<10} {'Status':<14} {'Progress':>8}"
    )
    click.echo("-" * 110)
    for p in projects:
        click.echo(
            f"{p.id:<32} {truncate(p.name, 24):<24} {truncate(p.client, 18):<18} "
            f"{p.start_date.isoformat():<10} {p.status.value:<14} "
            f"{format_percentage(progress_percentage(p)):>8}"
        )


@project_group.command("show")
@click.argument("project")
@click.option("--as-of", help="Reference date for item status (default: today)")
@click.pass_context
def show_project(ctx, project: str, as_of: str | None):
    """Show a project with its realised totals and items.

    PROJECT can be the project ID, an ID prefix or the project name.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    project_id = resolve_project_or_exit(ctx, project)
    today = parse_date_or_exit(ctx, as_of, "reference date") or date.today()

    project_service = ProjectService(db)
    p = project_service.require_project(user_id, project_id)
    metrics = project_service.project_metrics(user_id, project_id)
    costs = CostService(db).list_cost_items(user_id, project_id=project_id, today=today)
    revenues = RevenueService(db).list_revenue_items(user_id, project_id=project_id, today=today)

    click.echo(f"\nProject: {p.name} (ID: {p.id})")
    click.echo(f"  Client: {p.client}")
    click.echo(f"  Start: {p.start_date.isoformat()}")
    click.echo(f"  Status: {p.status.value}")
    if p.description:
        click.echo(f"  Description: {p.description}")
    click.echo(f"  Planned revenue: {format_money(p.planned_total_revenue)}")
    click.echo(f"  Planned cost: {format_money(p.planned_total_cost)}")
    click.echo(f"  Predicted profit: {format_money(p.planned_total_revenue - p.planned_total_cost)}")
    click.echo(f"  Received revenue: {format_money(metrics.actual_total_revenue)}")
    click.echo(f"  Actual cost: {format_money(metrics.actual_total_cost)}")
    click.echo(f"  Actual profit: {format_money(metrics.actual_profit)}")
    click.echo(f"  Margin: {format_percentage(metrics.margin_percentage)}")

    click.echo(f"\nReceivables ({len(revenues)}):")
    for item in revenues:
        click.echo(
            f"  {item.transaction_date.isoformat()}  {revenue_status(item, today).value:<9} "
            f"{truncate(item.name, 32):<32} {format_money(item.planned_amount):>14} "
            f"{format_money(item.received_amount):>14}"
        )

    click.echo(f"\nPayables ({len(costs)}):")
    for item in costs:
        click.echo(
            f"  {item.transaction_date.isoformat()}  {cost_status(item, today).value:<9} "
            f"{truncate(item.name, 32):<32} {format_money(item.planned_amount):>14} "
            f"{format_money(item.actual_amount):>14} {format_deviation(cost_deviation(item))}"
        )


@project_group.command("update")
@click.argument("project")
@click.option("--name", help="Project name")
@click.option("--client", help="Client name")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--revenue", "planned_revenue", help="Planned total revenue")
@click.option("--cost", "planned_cost", help="Planned total cost")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Project status")
@click.option("--description", help="Project description (empty string clears it)")
@click.pass_context
def update_project(
    ctx,
    project: str,
    name: str | None,
    client: str | None,
    start_date: str | None,
    planned_revenue: str | None,
    planned_cost: str | None,
    status: str | None,
    description: str | None,
):
    """Update the given fields of a project.

    Examples:
        finestra project update "Casa Verde" --status "Concluído"
        finestra project update 3f2a --cost 9500
    """
    project_id = resolve_project_or_exit(ctx, project)
    service = ProjectService(ctx.obj["db"])

    fields = {}
    if name is not None:
        fields["name"] = name
    if client is not None:
        fields["client"] = client
    if start_date is not None:
        fields["start_date"] = parse_date_or_exit(ctx, start_date, "start date")
    if planned_revenue is not None:
        fields["planned_total_revenue"] = parse_amount_or_exit(ctx, planned_revenue, "revenue")
    if planned_cost is not None:
        fields["planned_total_cost"] = parse_amount_or_exit(ctx, planned_cost, "cost")
    if status is not None:
        fields["status"] = ProjectStatus(status)
    if description is not None:
        fields["description"] = description

    if not fields:
        click.echo("Nothing to update.")
        return

    try:
        service.update_project(ctx.obj["user_id"], project_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated project {project_id}")


@project_group.command("delete")
@click.argument("project")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_project(ctx, project: str, yes: bool):
    """Delete a project.

    Its payables and receivables are kept and show "N/A" as their project.
    """
    project_id = resolve_project_or_exit(ctx, project)
    service = ProjectService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete project {project_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_project(ctx.obj["user_id"], project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted project {project_id}")


@project_group.command("reconcile")
@click.argument("project")
@click.pass_context
def reconcile_project(ctx, project: str):
    """Recompute a project's stored totals from its items."""
    project_id = resolve_project_or_exit(ctx, project)
    service = ProjectService(ctx.obj["db"])

    try:
        metrics = service.reconcile_totals(ctx.obj["user_id"], project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if metrics is None:
        click.echo("Totals already match the project's items.")
        return
    click.echo(
        f"Updated totals: revenue {format_money(metrics.actual_total_revenue)}, "
        f"cost {format_money(metrics.actual_total_cost)}"
    )


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
