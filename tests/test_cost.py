"""Tests for payables: the cost service and cost commands."""

import pytest
from datetime import date
from decimal import Decimal

from finestra.cli.main import cli
from finestra.domain.entities import CostItemStatus
from finestra.domain.errors import NotFoundError, ValidationError

USER = "user-1"
OTHER_USER = "user-2"


class TestCostService:
    """Tests for CostService."""

    def test_add_company_cost(self, cost_service):
        item_id = cost_service.add_cost_item(
            USER, "Contador", "Outros", Decimal("450"), date(2024, 7, 20), supplier=" Escritório "
        )

        item = cost_service.get_cost_item(USER, item_id)
        assert item.project_id is None
        assert item.status == CostItemStatus.PENDENTE
        assert item.actual_amount == Decimal("0")
        assert item.supplier == "Escritório"

    def test_unknown_category_is_rejected(self, cost_service):
        with pytest.raises(ValidationError) as excinfo:
            cost_service.add_cost_item(USER, "Contador", "Viagens", Decimal("10"), date(2024, 7, 1))

        assert "Category 'Viagens' not found" in str(excinfo.value)

    def test_categories_are_per_user(self, cost_service):
        with pytest.raises(ValidationError):
            cost_service.add_cost_item(OTHER_USER, "Contador", "Outros", Decimal("10"), date(2024, 7, 1))

    def test_unknown_project_is_rejected(self, cost_service):
        with pytest.raises(NotFoundError):
            cost_service.add_cost_item(
                USER, "Tijolos", "Materiais", Decimal("10"), date(2024, 7, 1), project_id="missing"
            )
        assert cost_service.list_cost_items(USER) == []

    @pytest.mark.parametrize(
        "name,planned,message",
        [
            ("X", Decimal("10"), "at least 2 characters"),
            ("Tijolos", Decimal("-1"), "must not be negative"),
            ("Tijolos", None, "Planned amount is required"),
        ],
    )
    def test_validation(self, cost_service, name, planned, message):
        with pytest.raises(ValidationError) as excinfo:
            cost_service.add_cost_item(USER, name, "Materiais", planned, date(2024, 7, 1))

        assert message in str(excinfo.value)

    def test_add_installments(self, cost_service, sample_project):
        ids = cost_service.add_installments(
            USER,
            "Notebook",
            "Software",
            Decimal("100.00"),
            3,
            date(2024, 1, 31),
            project_id=sample_project.id,
        )

        items = [cost_service.get_cost_item(USER, item_id) for item_id in ids]
        assert [i.name for i in items] == [
            "Notebook - Parcela 1/3",
            "Notebook - Parcela 2/3",
            "Notebook - Parcela 3/3",
        ]
        assert [i.planned_amount for i in items] == [
            Decimal("33.33"),
            Decimal("33.33"),
            Decimal("33.34"),
        ]
        assert [i.transaction_date for i in items] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]
        assert len({i.installment_group_id for i in items}) == 1
        assert all(i.project_id == sample_project.id for i in items)

    def test_retrying_installments_with_same_group_id(self, cost_service):
        args = (USER, "Notebook", "Software", Decimal("100.00"), 3, date(2024, 1, 31))

        first = cost_service.add_installments(*args, group_id="retry-1")
        second = cost_service.add_installments(*args, group_id="retry-1")

        assert second == first
        assert len(cost_service.list_cost_items(USER)) == 3
        assert cost_service.get_cost_item(USER, first[0]).installment_group_id == "retry-1"

    def test_invalid_installment_plan_writes_nothing(self, cost_service):
        with pytest.raises(ValidationError):
            cost_service.add_installments(USER, "Notebook", "Software", Decimal("100"), 1, date(2024, 1, 1))

        assert cost_service.list_cost_items(USER) == []

    def test_quick_expense(self, cost_service):
        item_id = cost_service.quick_expense(
            USER, "Café", "Outros", Decimal("35.90"), today=date(2024, 7, 10)
        )

        item = cost_service.get_cost_item(USER, item_id)
        assert item.status == CostItemStatus.PAGO
        assert item.planned_amount == Decimal("35.90")
        assert item.actual_amount == Decimal("35.90")
        assert item.transaction_date == date(2024, 7, 10)

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_quick_expense_requires_positive_amount(self, cost_service, amount):
        with pytest.raises(ValidationError):
            cost_service.quick_expense(USER, "Café", "Outros", amount)

    def test_list_sorted_by_status(self, cost_service):
        today = date(2024, 7, 10)
        cost_service.add_cost_item(USER, "Pendente", "Outros", Decimal("10"), date(2024, 7, 20))
        cost_service.quick_expense(USER, "Pago", "Outros", Decimal("10"), today=date(2024, 7, 5))
        cost_service.add_cost_item(USER, "Atrasado", "Outros", Decimal("10"), date(2024, 7, 1))

        items = cost_service.list_cost_items(USER, today=today)

        assert [i.name for i in items] == ["Atrasado", "Pendente", "Pago"]

    def test_list_company_only(self, cost_service, sample_project):
        cost_service.add_cost_item(USER, "Empresa", "Outros", Decimal("10"), date(2024, 7, 1))
        cost_service.add_cost_item(
            USER, "Projeto", "Outros", Decimal("10"), date(2024, 7, 1), project_id=sample_project.id
        )

        items = cost_service.list_cost_items(USER, company_only=True)

        assert [i.name for i in items] == ["Empresa"]

    def test_mark_paid_defaults_to_planned(self, cost_service):
        item_id = cost_service.add_cost_item(USER, "Aluguel", "Outros", Decimal("2500"), date(2024, 7, 5))

        cost_service.mark_paid(USER, item_id)

        item = cost_service.get_cost_item(USER, item_id)
        assert item.status == CostItemStatus.PAGO
        assert item.actual_amount == Decimal("2500.00")

    def test_mark_paid_with_amount(self, cost_service):
        item_id = cost_service.add_cost_item(USER, "Aluguel", "Outros", Decimal("2500"), date(2024, 7, 5))

        cost_service.mark_paid(USER, item_id, Decimal("2600"))

        assert cost_service.get_cost_item(USER, item_id).actual_amount == Decimal("2600.00")

    def test_mark_paid_missing(self, cost_service):
        with pytest.raises(NotFoundError):
            cost_service.mark_paid(USER, "missing")

    def test_delete(self, cost_service):
        item_id = cost_service.add_cost_item(USER, "Aluguel", "Outros", Decimal("2500"), date(2024, 7, 5))

        cost_service.delete_cost_item(USER, item_id)

        assert cost_service.get_cost_item(USER, item_id) is None
        with pytest.raises(NotFoundError):
            cost_service.delete_cost_item(USER, item_id)


class TestCostCommands:
    """Tests for cost CLI commands."""

    def _invoke(self, cli_runner, temp_db, *args, **kwargs):
        return cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--user", USER, *args], **kwargs
        )

    def test_cost_add(self, cli_runner, temp_db, category_service, sample_project):
        result = self._invoke(
            cli_runner, temp_db,
            "cost", "add", "Cimento",
            "--category", "Materiais", "--amount", "1200",
            "--date", "2024-07-15", "--project", "Casa Verde",
        )

        assert result.exit_code == 0
        assert "Created cost item 'Cimento'" in result.output

    def test_cost_add_installments(self, cli_runner, temp_db, category_service):
        result = self._invoke(
            cli_runner, temp_db,
            "cost", "add", "Notebook",
            "--category", "Software", "--amount", "100",
            "--date", "2024-01-31", "--installments", "3",
        )

        assert result.exit_code == 0
        assert "Created 3 installments for 'Notebook'" in result.output
        assert "2024-02-29" in result.output
        assert "R$ 33.34" in result.output

    def test_cost_add_installments_rejects_paid(self, cli_runner, temp_db, category_service):
        result = self._invoke(
            cli_runner, temp_db,
            "cost", "add", "Notebook",
            "--category", "Software", "--amount", "100",
            "--installments", "3", "--paid",
        )

        assert result.exit_code != 0
        assert "cannot be used with --installments" in result.output

    def test_cost_add_unknown_category(self, cli_runner, temp_db, category_service):
        result = self._invoke(
            cli_runner, temp_db, "cost", "add", "Passagem", "--category", "Viagens", "--amount", "100"
        )

        assert result.exit_code != 0
        assert "Category 'Viagens' not found" in result.output

    def test_cost_quick(self, cli_runner, temp_db, category_service):
        result = self._invoke(
            cli_runner, temp_db, "cost", "quick", "Café", "--category", "Outros", "--amount", "35.90"
        )

        assert result.exit_code == 0
        assert "Recorded expense 'Café' of R$ 35.90" in result.output

    def test_cost_list(self, cli_runner, temp_db, cost_service):
        cost_service.add_cost_item(USER, "Luz", "Outros", Decimal("10"), date(2024, 7, 1))
        cost_service.add_cost_item(USER, "Internet", "Outros", Decimal("20"), date(2024, 7, 20))

        result = self._invoke(cli_runner, temp_db, "cost", "list", "--as-of", "2024-07-10")

        assert result.exit_code == 0
        assert "Found 2 cost item(s)" in result.output
        assert result.output.index("Luz") < result.output.index("Internet")
        assert "N/A" in result.output
        assert "Planned: R$ 30.00" in result.output

    def test_cost_list_period(self, cli_runner, temp_db, cost_service):
        cost_service.add_cost_item(USER, "Junho", "Outros", Decimal("10"), date(2024, 6, 15))
        cost_service.add_cost_item(USER, "Julho", "Outros", Decimal("20"), date(2024, 7, 15))

        result = self._invoke(
            cli_runner, temp_db, "cost", "list", "--period", "this-month", "--as-of", "2024-07-10"
        )

        assert result.exit_code == 0
        assert "Julho" in result.output
        assert "Junho" not in result.output

    def test_cost_list_project_and_company_conflict(self, cli_runner, temp_db):
        result = self._invoke(cli_runner, temp_db, "cost", "list", "--project", "x", "--company")

        assert result.exit_code != 0
        assert "cannot be combined" in result.output

    def test_cost_list_empty(self, cli_runner, temp_db):
        result = self._invoke(cli_runner, temp_db, "cost", "list")

        assert result.exit_code == 0
        assert "No cost items found." in result.output

    def test_cost_pay(self, cli_runner, temp_db, cost_service):
        item_id = cost_service.add_cost_item(USER, "Aluguel", "Outros", Decimal("2500"), date(2024, 7, 5))

        result = self._invoke(cli_runner, temp_db, "cost", "pay", item_id, "--amount", "2550")

        assert result.exit_code == 0
        assert f"Marked cost item {item_id} as paid" in result.output
        temp_db.disconnect()
        item = cost_service.get_cost_item(USER, item_id)
        assert item.status == CostItemStatus.PAGO
        assert item.actual_amount == Decimal("2550.00")

    def test_cost_pay_missing(self, cli_runner, temp_db):
        result = self._invoke(cli_runner, temp_db, "cost", "pay", "missing")

        assert result.exit_code != 0
        assert "Cost item missing not found" in result.output

    def test_cost_delete(self, cli_runner, temp_db, cost_service):
        item_id = cost_service.add_cost_item(USER, "Aluguel", "Outros", Decimal("2500"), date(2024, 7, 5))

        result = self._invoke(cli_runner, temp_db, "cost", "delete", item_id, "--yes")

        assert result.exit_code == 0
        assert f"Deleted cost item {item_id}" in result.output
