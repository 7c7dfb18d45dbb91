"""Option parsing helpers that exit with a CLI error on bad input."""

from datetime import date
from decimal import Decimal

import click

from finestra.utils.amount_parser import parse_amount
from finestra.utils.date_parser import parse_date


def parse_date_or_exit(
    ctx: click.Context, value: str | None, label: str = "date", today: date | None = None
) -> date | None:
    """Parse a date option, or exit with an error. None stays None."""
    if value is None:
        return None
    try:
        return parse_date(value, today=today)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(
    ctx: click.Context, value: str | None, label: str = "amount"
) -> Decimal | None:
    """Parse an amount option, or exit with an error. None stays None."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
