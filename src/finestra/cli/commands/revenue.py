"""Receivable (revenue item) commands."""

from datetime import date

import click
from finestra.domain.errors import DomainError
from finestra.domain.metrics import NO_PROJECT
from finestra.domain.project import ProjectService
from finestra.domain.revenue import RevenueService
from finestra.domain.status import revenue_status
from finestra.cli.date_filters import period_options, resolve_cli_date_range
from finestra.cli.error_handling import handle_domain_error
from finestra.cli.formatting import format_money, truncate
from finestra.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from finestra.cli.project_resolution import resolve_project_or_exit


@click.group()
def revenue_group():
    """Manage receivables."""
    pass


@revenue_group.command("add")
@click.argument("name")
@click.option("--project", required=True, help="Project name or ID")
@click.option("--amount", required=True, help="Planned amount, or the total when using --installments")
@click.option("--date", "when", default="today", show_default=True, help="Due date, or first due date with --installments")
@click.option("--received", help="Amount already received")
@click.option("--method", "payment_method", help="Payment method (e.g., Pix, Boleto)")
@click.option("--description", help="Description")
@click.option("--installments", type=int, help="Split the amount into this many monthly installments")
@click.pass_context
def add_revenue(
    ctx,
    name: str,
    project: str,
    amount: str,
    when: str,
    received: str | None,
    payment_method: str | None,
    description: str | None,
    installments: int | None,
):
    """Add a receivable to a project, optionally split into installments.

    Examples:
        finestra revenue add "Entrada" --project "Casa Verde" --amount 5000 --date 2024-07-15
        finestra revenue add "Saldo" --project "Casa Verde" --amount 10000 --installments 4
    """
    service = RevenueService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    project_id = resolve_project_or_exit(ctx, project)
    due_date = parse_date_or_exit(ctx, when)
    planned = parse_amount_or_exit(ctx, amount)

    if installments is not None:
        if received is not None:
            click.echo("Error: --received cannot be used with --installments.", err=True)
            ctx.exit(1)
        try:
            ids = service.add_installments(
                user_id=user_id,
                project_id=project_id,
                name=name,
                total_amount=planned,
                number_of_installments=installments,
                first_installment_date=due_date,
                payment_method=payment_method,
                description=description,
            )
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Created {len(ids)} installments for '{name.strip()}'")
        for item_id in ids:
            item = service.get_revenue_item(user_id, item_id)
            click.echo(
                f"  {item.transaction_date.isoformat()}  {item.name:<40} "
                f"{format_money(item.planned_amount):>14}  (ID: {item.id})"
            )
        return

    received_amount = parse_amount_or_exit(ctx, received, "received amount")
    try:
        item_id = service.add_revenue_item(
            user_id=user_id,
            project_id=project_id,
            name=name,
            planned_amount=planned,
            received_amount=received_amount if received_amount is not None else 0,
            transaction_date=due_date,
            payment_method=payment_method,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created revenue item '{name.strip()}' (ID: {item_id})")


@revenue_group.command("quick")
@click.argument("name")
@click.option("--project", required=True, help="Project name or ID")
@click.option("--amount", required=True, help="Amount received")
@click.option("--description", help="Description")
@click.pass_context
def quick_gain(ctx, name: str, project: str, amount: str, description: str | None):
    """Record revenue received today."""
    service = RevenueService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)
    received = parse_amount_or_exit(ctx, amount)

    try:
        item_id = service.quick_gain(
            user_id=ctx.obj["user_id"],
            project_id=project_id,
            name=name,
            amount=received,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded gain '{name.strip()}' of {format_money(received)} (ID: {item_id})")


@revenue_group.command("list")
@click.option("--project", help="Only items of this project (name or ID)")
@period_options
@click.option("--as-of", help="Reference date for status (default: today)")
@click.pass_context
def list_revenues(
    ctx,
    project: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    as_of: str | None,
):
    """List receivables: overdue first, then pending, then received."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]

    today = parse_date_or_exit(ctx, as_of, "reference date") or date.today()
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period, today=today
    )
    project_id = resolve_project_or_exit(ctx, project)

    items = RevenueService(db).list_revenue_items(
        user_id, project_id=project_id, start_date=start, end_date=end, today=today
    )
    if not items:
        click.echo("No revenue items found.")
        return

    projects = {p.id: p.name for p in ProjectService(db).list_projects(user_id)}

    click.echo(f"\nFound {len(items)} revenue item(s):")
    click.echo("-" * 130)
    click.echo(
        f"{'ID':<32} {'Date':<10} {'Status':<9} {'Name':<30} {'Project':<16} "
        f"{'Planned':>14} {'Received':>14}"
    )
    click.echo("-" * 130)
    for item in items:
        project_name = projects.get(item.project_id, NO_PROJECT)
        click.echo(
            f"{item.id:<32} {item.transaction_date.isoformat():<10} "
            f"{revenue_status(item, today).value:<9} {truncate(item.name, 30):<30} "
            f"{truncate(project_name, 16):<16} {format_money(item.planned_amount):>14} "
            f"{format_money(item.received_amount):>14}"
        )

    click.echo("-" * 130)
    planned = sum(item.planned_amount for item in items)
    received = sum(item.received_amount for item in items)
    click.echo(
        f"Planned: {format_money(planned)} | Received: {format_money(received)} | Count: {len(items)}"
    )


@revenue_group.command("receive")
@click.argument("item_id")
@click.option("--amount", help="Amount received (default: the planned amount)")
@click.pass_context
def receive_revenue(ctx, item_id: str, amount: str | None):
    """Register the receipt of a receivable."""
    service = RevenueService(ctx.obj["db"])

    try:
        service.register_receipt(
            ctx.obj["user_id"], item_id, parse_amount_or_exit(ctx, amount)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered receipt for revenue item {item_id}")


@revenue_group.command("delete")
@click.argument("item_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_revenue(ctx, item_id: str, yes: bool):
    """Delete a receivable."""
    service = RevenueService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete revenue item {item_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_revenue_item(ctx.obj["user_id"], item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted revenue item {item_id}")


def register_commands(cli):
    """Register revenue commands with main CLI."""
    cli.add_command(revenue_group, name="revenue")
