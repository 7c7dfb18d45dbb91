"""Payable (cost item) commands."""

from datetime import date

import click
from finestra.domain.cost import CostService
from finestra.domain.entities import CostItemStatus
from finestra.domain.errors import DomainError
from finestra.domain.metrics import NO_PROJECT
from finestra.domain.project import ProjectService
from finestra.domain.status import cost_deviation, cost_status
from finestra.cli.date_filters import period_options, resolve_cli_date_range
from finestra.cli.error_handling import handle_domain_error
from finestra.cli.formatting import format_deviation, format_money, truncate
from finestra.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from finestra.cli.project_resolution import resolve_project_or_exit


@click.group()
def cost_group():
    """Manage payables."""
    pass


@cost_group.command("add")
@click.argument("name")
@click.option("--category", required=True, help="Cost category name")
@click.option("--amount", required=True, help="Planned amount, or the total when using --installments")
@click.option("--date", "when", default="today", show_default=True, help="Due date, or first due date with --installments")
@click.option("--project", help="Project name or ID (omit for a company cost)")
@click.option("--supplier", help="Supplier name")
@click.option("--description", help="Description")
@click.option("--actual", help="Amount already paid")
@click.option("--paid", is_flag=True, help="Record the item as paid")
@click.option("--installments", type=int, help="Split the amount into this many monthly installments")
@click.pass_context
def add_cost(
    ctx,
    name: str,
    category: str,
    amount: str,
    when: str,
    project: str | None,
    supplier: str | None,
    description: str | None,
    actual: str | None,
    paid: bool,
    installments: int | None,
):
    """Add a payable, optionally split into installments.

    Examples:
        finestra cost add "Cimento" --category Materiais --amount 1200 --project "Casa Verde"
        finestra cost add "Notebook" --category Software --amount 100 --installments 3 --date 2024-01-31
    """
    service = CostService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    project_id = resolve_project_or_exit(ctx, project)
    due_date = parse_date_or_exit(ctx, when)
    planned = parse_amount_or_exit(ctx, amount)

    if installments is not None:
        if actual is not None or paid:
            click.echo("Error: --actual and --paid cannot be used with --installments.", err=True)
            ctx.exit(1)
        try:
            ids = service.add_installments(
                user_id=user_id,
                name=name,
                category=category,
                total_amount=planned,
                number_of_installments=installments,
                first_installment_date=due_date,
                project_id=project_id,
                supplier=supplier,
                description=description,
            )
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Created {len(ids)} installments for '{name.strip()}'")
        for item_id in ids:
            item = service.get_cost_item(user_id, item_id)
            click.echo(
                f"  {item.transaction_date.isoformat()}  {item.name:<40} "
                f"{format_money(item.planned_amount):>14}  (ID: {item.id})"
            )
        return

    actual_amount = parse_amount_or_exit(ctx, actual, "actual amount")
    if paid and actual_amount is None:
        actual_amount = planned
    try:
        item_id = service.add_cost_item(
            user_id=user_id,
            name=name,
            category=category,
            planned_amount=planned,
            actual_amount=actual_amount if actual_amount is not None else 0,
            status=CostItemStatus.PAGO if paid else CostItemStatus.PENDENTE,
            transaction_date=due_date,
            project_id=project_id,
            supplier=supplier,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created cost item '{name.strip()}' (ID: {item_id})")


@cost_group.command("quick")
@click.argument("name")
@click.option("--category", required=True, help="Cost category name")
@click.option("--amount", required=True, help="Amount paid")
@click.option("--project", help="Project name or ID (omit for a company cost)")
@click.option("--description", help="Description")
@click.pass_context
def quick_expense(
    ctx, name: str, category: str, amount: str, project: str | None, description: str | None
):
    """Record an expense paid today."""
    service = CostService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)
    paid = parse_amount_or_exit(ctx, amount)

    try:
        item_id = service.quick_expense(
            user_id=ctx.obj["user_id"],
            name=name,
            category=category,
            amount=paid,
            project_id=project_id,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded expense '{name.strip()}' of {format_money(paid)} (ID: {item_id})")


@cost_group.command("list")
@click.option("--project", help="Only items of this project (name or ID)")
@click.option("--company", is_flag=True, help="Only company costs without a project")
@period_options
@click.option("--as-of", help="Reference date for status (default: today)")
@click.pass_context
def list_costs(
    ctx,
    project: str | None,
    company: bool,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    as_of: str | None,
):
    """List payables: overdue first, then pending, then paid."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    if project and company:
        click.echo("Error: --project and --company cannot be combined.", err=True)
        ctx.exit(1)

    today = parse_date_or_exit(ctx, as_of, "reference date") or date.today()
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period, today=today
    )
    project_id = resolve_project_or_exit(ctx, project)

    items = CostService(db).list_cost_items(
        user_id,
        project_id=project_id,
        company_only=company,
        start_date=start,
        end_date=end,
        today=today,
    )
    if not items:
        click.echo("No cost items found.")
        return

    projects = {p.id: p.name for p in ProjectService(db).list_projects(user_id)}

    click.echo(f"\nFound {len(items)} cost item(s):")
    click.echo("-" * 150)
    click.echo(
        f"{'ID':<32} {'Date':<10} {'Status':<9} {'Name':<30} {'Category':<14} "
        f"{'Project':<16} {'Planned':>14} {'Actual':>14} {'Dev.':>6}"
    )
    click.echo("-" * 150)
    for item in items:
        project_name = projects.get(item.project_id, NO_PROJECT)
        click.echo(
            f"{item.id:<32} {item.transaction_date.isoformat():<10} "
            f"{cost_status(item, today).value:<9} {truncate(item.name, 30):<30} "
            f"{truncate(item.category, 14):<14} {truncate(project_name, 16):<16} "
            f"{format_money(item.planned_amount):>14} {format_money(item.actual_amount):>14} "
            f"{format_deviation(cost_deviation(item)):>6}"
        )

    click.echo("-" * 150)
    planned = sum(item.planned_amount for item in items)
    paid = sum(item.actual_amount for item in items)
    click.echo(f"Planned: {format_money(planned)} | Paid: {format_money(paid)} | Count: {len(items)}")


@cost_group.command("pay")
@click.argument("item_id")
@click.option("--amount", help="Amount paid (default: the planned amount)")
@click.pass_context
def pay_cost(ctx, item_id: str, amount: str | None):
    """Mark a payable as paid."""
    service = CostService(ctx.obj["db"])

    try:
        service.mark_paid(
            ctx.obj["user_id"], item_id, parse_amount_or_exit(ctx, amount)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Marked cost item {item_id} as paid")


@cost_group.command("delete")
@click.argument("item_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_cost(ctx, item_id: str, yes: bool):
    """Delete a payable."""
    service = CostService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete cost item {item_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_cost_item(ctx.obj["user_id"], item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted cost item {item_id}")


def register_commands(cli):
    """Register cost commands with main CLI."""
    cli.add_command(cost_group, name="cost")
