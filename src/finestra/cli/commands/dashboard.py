"""Dashboard commands."""

from datetime import date

import click
from finestra.domain.dashboard import DashboardService
from finestra.domain.metrics import TRAILING_MONTHS
from finestra.domain.status import cost_status, revenue_status
from finestra.cli.date_filters import period_options, resolve_cli_date_range
from finestra.cli.formatting import format_money, format_percentage, truncate
from finestra.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from finestra.cli.project_resolution import resolve_project_or_exit


@click.group()
def dashboard_group():
    """Show dashboard figures."""
    pass


@dashboard_group.command("overview")
@click.option("--month", help="Any date in the month to show (default: this month)")
@click.pass_context
def overview(ctx, month: str | None):
    """Key metrics for one month and for the whole portfolio."""
    service = DashboardService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    month_date = parse_date_or_exit(ctx, month, "month") or date.today()

    monthly = service.overview(user_id, month_date)
    portfolio = service.portfolio_metrics(user_id)

    click.echo(f"\nOverview for {monthly.month.strftime('%Y-%m')}:")
    click.echo(f"  Revenue received: {format_money(monthly.revenue)}")
    click.echo(f"  Costs paid:       {format_money(monthly.cost)}")
    click.echo(f"  Result:           {format_money(monthly.result)}")
    click.echo(f"  Projects in progress: {monthly.projects_in_progress}")

    click.echo("\nPortfolio:")
    click.echo(f"  Revenue received: {format_money(portfolio.actual_total_revenue)}")
    click.echo(f"  Costs paid:       {format_money(portfolio.actual_total_cost)}")
    click.echo(f"  Profit:           {format_money(portfolio.actual_profit)}")
    click.echo(f"  Margin:           {format_percentage(portfolio.margin_percentage)}")


@dashboard_group.command("week")
@click.option("--as-of", help="Reference date (default: today)")
@click.pass_context
def week(ctx, as_of: str | None):
    """Payments and receipts due this week, plus everything overdue."""
    service = DashboardService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    today = parse_date_or_exit(ctx, as_of, "reference date") or date.today()

    summary = service.week(user_id, today)
    late = service.overdue(user_id, today)

    click.echo(
        f"\nWeek {summary.week_start.isoformat()} to {summary.week_end.isoformat()}"
    )
    click.echo(f"\nTo pay ({len(summary.payments)}): {format_money(summary.total_to_pay)}")
    for item in summary.payments:
        click.echo(
            f"  {item.transaction_date.isoformat()}  {cost_status(item, today).value:<9} "
            f"{truncate(item.name, 36):<36} {format_money(item.planned_amount):>14}"
        )
    click.echo(
        f"\nTo receive ({len(summary.receivables)}): {format_money(summary.total_to_receive)}"
    )
    for item in summary.receivables:
        click.echo(
            f"  {item.transaction_date.isoformat()}  {revenue_status(item, today).value:<9} "
            f"{truncate(item.name, 36):<36} {format_money(item.planned_amount):>14}"
        )

    if late.costs or late.revenues:
        click.echo(f"\nOverdue: {len(late.costs)} payable(s), {len(late.revenues)} receivable(s)")
        for item in late.costs:
            click.echo(
                f"  {item.transaction_date.isoformat()}  Pay      "
                f"{truncate(item.name, 36):<36} {format_money(item.planned_amount):>14}"
            )
        for item in late.revenues:
            click.echo(
                f"  {item.transaction_date.isoformat()}  Receive  "
                f"{truncate(item.name, 36):<36} {format_money(item.planned_amount):>14}"
            )


@dashboard_group.command("cashflow")
@period_options
@click.option("--initial-balance", default="0", show_default=True, help="Opening cash balance")
@click.pass_context
def cashflow(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    initial_balance: str,
):
    """Merged ledger of receipts and payments, newest first."""
    service = DashboardService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    opening = parse_amount_or_exit(ctx, initial_balance, "initial balance")

    entries = service.cash_flow(user_id, start, end)
    if not entries:
        click.echo("No transactions found.")
        return

    click.echo(f"\nCash flow ({len(entries)} transaction(s)):")
    click.echo("-" * 110)
    click.echo(
        f"{'Date':<10} {'Type':<8} {'Description':<30} {'Category':<14} {'Project':<16} "
        f"{'Status':<9} {'Amount':>14}"
    )
    click.echo("-" * 110)
    for entry in entries:
        click.echo(
            f"{entry.date.isoformat():<10} {entry.type.value:<8} "
            f"{truncate(entry.description, 30):<30} {truncate(entry.category, 14):<14} "
            f"{truncate(entry.project, 16):<16} {entry.status.value:<9} "
            f"{format_money(entry.amount):>14}"
        )
    click.echo("-" * 110)
    click.echo(f"Balance: {format_money(service.balance(user_id, opening, start, end))}")


@dashboard_group.command("charts")
@click.option("--months", type=click.IntRange(min=1), default=TRAILING_MONTHS, show_default=True, help="Number of months")
@click.option("--project", help="Only items of this project (name or ID)")
@click.option("--as-of", help="Reference date (default: today)")
@click.pass_context
def charts(ctx, months: int, project: str | None, as_of: str | None):
    """Monthly planned vs actual series and cost by category."""
    service = DashboardService(ctx.obj["db"])
    today = parse_date_or_exit(ctx, as_of, "reference date") or date.today()
    project_id = resolve_project_or_exit(ctx, project)

    data = service.charts(ctx.obj["user_id"], today, months, project_id=project_id)

    click.echo("\nCosts by month:")
    click.echo(f"  {'Month':<8} {'Planned':>14} {'Actual':>14}")
    for point in data.costs:
        click.echo(
            f"  {point.label:<8} {format_money(point.planned):>14} {format_money(point.actual):>14}"
        )

    click.echo("\nRevenue by month:")
    click.echo(f"  {'Month':<8} {'Planned':>14} {'Received':>14}")
    for point in data.revenues:
        click.echo(
            f"  {point.label:<8} {format_money(point.planned):>14} {format_money(point.actual):>14}"
        )

    click.echo("\nCosts by category:")
    if not data.categories:
        click.echo("  No cost items.")
    for total in data.categories:
        click.echo(f"  {truncate(total.category, 30):<30} {format_money(total.value):>14}")


@dashboard_group.command("projects")
@click.pass_context
def projects(ctx):
    """Projects table with predicted and actual profit."""
    service = DashboardService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]

    rows = service.projects(user_id)
    if not rows:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 100)
    click.echo(
        f"{'Name':<24} {'Client':<18} {'Status':<14} {'Predicted':>14} {'Actual':>14} {'Progress':>9}"
    )
    click.echo("-" * 100)
    for row in rows:
        click.echo(
            f"{truncate(row.project.name, 24):<24} {truncate(row.project.client, 18):<18} "
            f"{row.project.status.value:<14} {format_money(row.predicted_profit):>14} "
            f"{format_money(row.actual_profit):>14} {format_percentage(row.progress):>9}"
        )

    progress = service.progress(user_id)
    click.echo("-" * 100)
    click.echo(
        f"Average progress: {format_percentage(progress.progress)} | "
        f"Completed: {progress.completed} | In progress: {progress.in_progress} | "
        f"Other: {progress.pending}"
    )


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(dashboard_group, name="dashboard")
