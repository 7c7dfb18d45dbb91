"""Installment schedule generation.

A total amount is split into N lines one calendar month apart. Every line
but the last carries the total divided by N truncated to cents; the last
line absorbs the remainder so the schedule always sums to the total.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from finestra.domain.entities import (
    CostItemDraft,
    CostItemStatus,
    InstallmentLine,
    RevenueItemDraft,
)
from finestra.domain.errors import ValidationError
from finestra.utils.amount_parser import floor_amount, quantize_amount

MIN_INSTALLMENTS = 2


def installment_name(base_name: str, number: int, total: int) -> str:
    """Name of the ``number``-th of ``total`` installments."""
    return f"{base_name} - Parcela {number}/{total}"


def installment_due_date(first_installment_date: date, index: int) -> date:
    """Due date of the installment at zero-based ``index``.

    Always computed from the first date so day-of-month clamping in a short
    month does not carry over to later installments.
    """
    return first_installment_date + relativedelta(months=index)


def split_installments(
    name: Optional[str],
    total_amount: Optional[Decimal],
    number_of_installments: Optional[int],
    first_installment_date: Optional[date],
) -> list[InstallmentLine]:
    """Split a total into an installment schedule.

    Args:
        name: Base name, suffixed with " - Parcela i/N" on each line
        total_amount: Total to split, must be positive
        number_of_installments: Number of lines, at least 2
        first_installment_date: Due date of the first line

    Returns:
        Ordered list of installment lines

    Raises:
        ValidationError: If any field is missing or out of range. Nothing is
            produced in that case.
    """
    errors = []
    if not name or not name.strip():
        errors.append("a name is required")
    if total_amount is None or Decimal(total_amount) <= 0:
        errors.append("the total amount must be greater than zero")
    if number_of_installments is None or number_of_installments < MIN_INSTALLMENTS:
        errors.append(f"there must be at least {MIN_INSTALLMENTS} installments")
    if first_installment_date is None:
        errors.append("the first installment date is required")
    if errors:
        raise ValidationError("Invalid installment plan: " + "; ".join(errors))

    total = quantize_amount(total_amount)
    count = number_of_installments
    installment_value = floor_amount(total / count)
    last_value = total - installment_value * (count - 1)

    lines = []
    for index in range(count):
        number = index + 1
        lines.append(
            InstallmentLine(
                number=number,
                total=count,
                name=installment_name(name.strip(), number, count),
                amount=last_value if number == count else installment_value,
                due_date=installment_due_date(first_installment_date, index),
            )
        )
    return lines


def new_installment_group_id() -> str:
    """Generate the key shared by every line of one installment batch."""
    return uuid.uuid4().hex


def cost_installment_drafts(
    name: Optional[str],
    category: str,
    total_amount: Optional[Decimal],
    number_of_installments: Optional[int],
    first_installment_date: Optional[date],
    project_id: Optional[str] = None,
    supplier: Optional[str] = None,
    description: Optional[str] = None,
    group_id: Optional[str] = None,
) -> list[CostItemDraft]:
    """Build pending payables for an installment plan."""
    lines = split_installments(
        name, total_amount, number_of_installments, first_installment_date
    )
    group_id = group_id or new_installment_group_id()
    return [
        CostItemDraft(
            name=line.name,
            category=category,
            planned_amount=line.amount,
            actual_amount=Decimal("0.00"),
            status=CostItemStatus.PENDENTE,
            transaction_date=line.due_date,
            project_id=project_id,
            supplier=supplier,
            description=description,
            is_installment=True,
            installment_number=line.number,
            total_installments=line.total,
            installment_group_id=group_id,
        )
        for line in lines
    ]


def revenue_installment_drafts(
    name: Optional[str],
    total_amount: Optional[Decimal],
    number_of_installments: Optional[int],
    first_installment_date: Optional[date],
    payment_method: Optional[str] = None,
    description: Optional[str] = None,
    group_id: Optional[str] = None,
) -> list[RevenueItemDraft]:
    """Build unreceived receivables for an installment plan."""
    lines = split_installments(
        name, total_amount, number_of_installments, first_installment_date
    )
    group_id = group_id or new_installment_group_id()
    return [
        RevenueItemDraft(
            name=line.name,
            planned_amount=line.amount,
            received_amount=Decimal("0.00"),
            transaction_date=line.due_date,
            payment_method=payment_method,
            description=description,
            is_installment=True,
            installment_number=line.number,
            total_installments=line.total,
            installment_group_id=group_id,
        )
        for line in lines
    ]
