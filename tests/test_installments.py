"""Tests for installment schedule generation."""

from datetime import date
from decimal import Decimal

import pytest

from finestra.domain.entities import CostItemStatus
from finestra.domain.errors import ValidationError
from finestra.domain.installments import (
    cost_installment_drafts,
    revenue_installment_drafts,
    split_installments,
)


def test_split_hundred_in_three():
    lines = split_installments("Notebook", Decimal("100.00"), 3, date(2024, 3, 10))

    assert [line.amount for line in lines] == [
        Decimal("33.33"),
        Decimal("33.33"),
        Decimal("33.34"),
    ]
    assert [line.due_date for line in lines] == [
        date(2024, 3, 10),
        date(2024, 4, 10),
        date(2024, 5, 10),
    ]
    assert [line.name for line in lines] == [
        "Notebook - Parcela 1/3",
        "Notebook - Parcela 2/3",
        "Notebook - Parcela 3/3",
    ]


@pytest.mark.parametrize(
    "total,count",
    [
        ("100.00", 3),
        ("0.05", 2),
        ("1000.01", 7),
        ("99.99", 12),
        ("12345.67", 9),
        ("10.00", 3),
    ],
)
def test_installments_sum_to_total(total, count):
    lines = split_installments("Item", Decimal(total), count, date(2024, 1, 1))

    assert len(lines) == count
    assert sum(line.amount for line in lines) == Decimal(total)
    # Every line but the last carries the same truncated value
    assert len({line.amount for line in lines[:-1]}) == 1
    assert lines[-1].amount >= lines[0].amount


def test_installment_value_truncates_instead_of_rounding():
    lines = split_installments("Item", Decimal("200.00"), 3, date(2024, 1, 1))

    assert lines[0].amount == Decimal("66.66")
    assert lines[-1].amount == Decimal("66.68")


def test_month_end_dates_do_not_drift():
    lines = split_installments("Aluguel", Decimal("400.00"), 4, date(2024, 1, 31))

    assert [line.due_date for line in lines] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


@pytest.mark.parametrize(
    "name,total,count,first,message",
    [
        ("Item", Decimal("100"), 1, date(2024, 1, 1), "at least 2 installments"),
        ("Item", Decimal("100"), None, date(2024, 1, 1), "at least 2 installments"),
        ("Item", None, 3, date(2024, 1, 1), "greater than zero"),
        ("Item", Decimal("0"), 3, date(2024, 1, 1), "greater than zero"),
        ("Item", Decimal("-5"), 3, date(2024, 1, 1), "greater than zero"),
        ("Item", Decimal("100"), 3, None, "first installment date"),
        ("  ", Decimal("100"), 3, date(2024, 1, 1), "name is required"),
    ],
)
def test_invalid_plans_are_rejected(name, total, count, first, message):
    with pytest.raises(ValidationError) as excinfo:
        split_installments(name, total, count, first)

    assert message in str(excinfo.value)


def test_all_problems_reported_together():
    with pytest.raises(ValidationError) as excinfo:
        split_installments(None, None, None, None)

    message = str(excinfo.value)
    assert "name is required" in message
    assert "greater than zero" in message
    assert "at least 2 installments" in message
    assert "first installment date" in message


def test_cost_drafts_share_group_and_start_pending():
    drafts = cost_installment_drafts(
        name="Notebook",
        category="Software",
        total_amount=Decimal("100.00"),
        number_of_installments=3,
        first_installment_date=date(2024, 3, 10),
        project_id="p1",
        supplier="Loja",
    )

    assert len(drafts) == 3
    assert len({d.installment_group_id for d in drafts}) == 1
    for number, draft in enumerate(drafts, start=1):
        assert draft.is_installment is True
        assert draft.is_recurring is False
        assert draft.installment_number == number
        assert draft.total_installments == 3
        assert draft.status == CostItemStatus.PENDENTE
        assert draft.actual_amount == Decimal("0")
        assert draft.category == "Software"
        assert draft.project_id == "p1"
        assert draft.supplier == "Loja"


def test_explicit_group_id_is_kept():
    drafts = revenue_installment_drafts(
        name="Saldo",
        total_amount=Decimal("1000"),
        number_of_installments=2,
        first_installment_date=date(2024, 7, 15),
        group_id="batch-1",
    )

    assert [d.installment_group_id for d in drafts] == ["batch-1", "batch-1"]
    assert [d.received_amount for d in drafts] == [Decimal("0"), Decimal("0")]
    assert [d.planned_amount for d in drafts] == [Decimal("500.00"), Decimal("500.00")]


def test_separate_batches_get_separate_groups():
    first = revenue_installment_drafts("A", Decimal("10"), 2, date(2024, 1, 1))
    second = revenue_installment_drafts("A", Decimal("10"), 2, date(2024, 1, 1))

    assert first[0].installment_group_id != second[0].installment_group_id
