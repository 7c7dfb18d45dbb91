"""Fixed-cost rollover."""

from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from finestra.domain.entities import (
    CostItemDraft,
    CostItemStatus,
    FixedCost,
    Frequency,
)

_PERIODS = {
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.ANNUALLY: relativedelta(years=1),
}


def advance_payment_date(current: date, frequency: Frequency = Frequency.MONTHLY) -> date:
    """Move a payment date forward by one period.

    Calendar arithmetic, clamped at month end: 2024-01-31 becomes 2024-02-29.
    """
    return current + _PERIODS[Frequency(frequency)]


def build_generated_cost_item(fixed_cost: FixedCost) -> CostItemDraft:
    """Draft of the payable produced by one generate action on ``fixed_cost``."""
    return CostItemDraft(
        name=fixed_cost.name,
        category=fixed_cost.category,
        planned_amount=fixed_cost.amount,
        actual_amount=Decimal("0.00"),
        status=CostItemStatus.PENDENTE,
        transaction_date=fixed_cost.next_payment_date,
        description=fixed_cost.description,
        is_recurring=True,
        frequency=fixed_cost.frequency,
        fixed_cost_id=fixed_cost.id,
    )
