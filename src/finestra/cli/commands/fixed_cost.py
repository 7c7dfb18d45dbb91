"""Fixed cost template commands."""

import click
from finestra.domain.entities import Frequency
from finestra.domain.errors import DomainError
from finestra.domain.fixed_cost import FixedCostService
from finestra.cli.error_handling import handle_domain_error
from finestra.cli.formatting import format_money, truncate
from finestra.cli.parsing import parse_amount_or_exit, parse_date_or_exit


@click.group()
def fixed_cost_group():
    """Manage recurring company costs."""
    pass


@fixed_cost_group.command("create")
@click.argument("name")
@click.option("--category", required=True, help="Cost category name")
@click.option("--amount", required=True, help="Amount of each payment")
@click.option("--next-date", required=True, help="Next payment date (YYYY-MM-DD or relative)")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency]),
    default=Frequency.MONTHLY.value,
    show_default=True,
    help="Payment frequency",
)
@click.option("--description", help="Description")
@click.pass_context
def create_fixed_cost(
    ctx,
    name: str,
    category: str,
    amount: str,
    next_date: str,
    frequency: str,
    description: str | None,
):
    """Create a fixed cost template.

    Examples:
        finestra fixed-cost create "Aluguel" --category Outros --amount 2500 --next-date 2024-01-31
    """
    service = FixedCostService(ctx.obj["db"])

    try:
        fixed_cost_id = service.create_fixed_cost(
            user_id=ctx.obj["user_id"],
            name=name,
            category=category,
            amount=parse_amount_or_exit(ctx, amount),
            next_payment_date=parse_date_or_exit(ctx, next_date, "next payment date"),
            frequency=Frequency(frequency),
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created fixed cost '{name.strip()}' (ID: {fixed_cost_id})")


@fixed_cost_group.command("list")
@click.pass_context
def list_fixed_costs(ctx):
    """List fixed costs by next payment date."""
    service = FixedCostService(ctx.obj["db"])

    fixed_costs = service.list_fixed_costs(ctx.obj["user_id"])
    if not fixed_costs:
        click.echo("No fixed costs found.")
        return

    click.echo("\nFixed costs:")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<32} {'Name':<24} {'Category':<14} {'Amount':>14} {'Frequency':<10} {'Next date':<10}"
    )
    click.echo("-" * 110)
    for fc in fixed_costs:
        click.echo(
            f"{fc.id:<32} {truncate(fc.name, 24):<24} {truncate(fc.category, 14):<14} "
            f"{format_money(fc.amount):>14} {fc.frequency.value:<10} "
            f"{fc.next_payment_date.isoformat():<10}"
        )


@fixed_cost_group.command("generate")
@click.argument("fixed_cost_id")
@click.pass_context
def generate_fixed_cost(ctx, fixed_cost_id: str):
    """Generate the next payable and move the template forward one period."""
    service = FixedCostService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]

    try:
        item_id = service.generate(user_id, fixed_cost_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    fixed_cost = service.get_fixed_cost(user_id, fixed_cost_id)
    click.echo(f"Generated cost item {item_id}")
    click.echo(f"Next payment date: {fixed_cost.next_payment_date.isoformat()}")


@fixed_cost_group.command("delete")
@click.argument("fixed_cost_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_fixed_cost(ctx, fixed_cost_id: str, yes: bool):
    """Delete a fixed cost. Payables it generated are kept."""
    service = FixedCostService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete fixed cost {fixed_cost_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_fixed_cost(ctx.obj["user_id"], fixed_cost_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted fixed cost {fixed_cost_id}")


def register_commands(cli):
    """Register fixed cost commands with main CLI."""
    cli.add_command(fixed_cost_group, name="fixed-cost")
