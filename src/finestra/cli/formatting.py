"""Display helpers shared by the CLI commands."""

from decimal import Decimal
from typing import Optional

from finestra.domain.entities import ItemDeviation


def format_money(amount: Decimal) -> str:
    """Render an amount as R$ with thousands separators."""
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {abs(amount):,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value:.1f}%"


def format_deviation(deviation: Optional[ItemDeviation]) -> str:
    """Badge text for a payable's deviation, empty when within range."""
    if deviation is None:
        return ""
    arrow = "+" if deviation.is_over else "-"
    return f"{arrow}{deviation.percentage:.0f}%"


def truncate(text: Optional[str], width: int) -> str:
    text = text or ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
