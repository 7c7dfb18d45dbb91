"""Tests for receivables: the revenue service and revenue commands."""

import pytest
from datetime import date
from decimal import Decimal

from finestra.cli.main import cli
from finestra.domain.errors import NotFoundError, ValidationError

USER = "user-1"
OTHER_USER = "user-2"


class TestRevenueService:
    """Tests for RevenueService."""

    def test_add_revenue_item(self, revenue_service, sample_project):
        item_id = revenue_service.add_revenue_item(
            USER,
            sample_project.id,
            "Entrada",
            Decimal("5000"),
            date(2024, 7, 15),
            payment_method="Pix",
        )

        item = revenue_service.get_revenue_item(USER, item_id)
        assert item.project_id == sample_project.id
        assert item.planned_amount == Decimal("5000.00")
        assert item.received_amount == Decimal("0")
        assert item.payment_method == "Pix"

    def test_project_is_required(self, revenue_service):
        with pytest.raises(NotFoundError):
            revenue_service.add_revenue_item(USER, "missing", "Entrada", Decimal("10"), date(2024, 7, 1))

    def test_other_users_project(self, revenue_service, sample_project):
        with pytest.raises(NotFoundError):
            revenue_service.add_revenue_item(
                OTHER_USER, sample_project.id, "Entrada", Decimal("10"), date(2024, 7, 1)
            )

    def test_negative_received_amount(self, revenue_service, sample_project):
        with pytest.raises(ValidationError):
            revenue_service.add_revenue_item(
                USER, sample_project.id, "Entrada", Decimal("10"), date(2024, 7, 1),
                received_amount=Decimal("-1"),
            )

    def test_add_installments(self, revenue_service, sample_project):
        ids = revenue_service.add_installments(
            USER, sample_project.id, "Saldo", Decimal("10000"), 4, date(2024, 8, 15),
            payment_method="Boleto",
        )

        items = [revenue_service.get_revenue_item(USER, item_id) for item_id in ids]
        assert [i.installment_number for i in items] == [1, 2, 3, 4]
        assert all(i.total_installments == 4 for i in items)
        assert all(i.planned_amount == Decimal("2500.00") for i in items)
        assert items[-1].transaction_date == date(2024, 11, 15)
        assert all(i.payment_method == "Boleto" for i in items)

    def test_retrying_installments_with_same_group_id(self, revenue_service, sample_project):
        args = (USER, sample_project.id, "Saldo", Decimal("10000"), 4, date(2024, 8, 15))

        first = revenue_service.add_installments(*args, group_id="retry-2")
        second = revenue_service.add_installments(*args, group_id="retry-2")

        assert second == first
        assert len(revenue_service.list_revenue_items(USER)) == 4

    def test_installments_under_missing_project_write_nothing(self, revenue_service):
        with pytest.raises(NotFoundError):
            revenue_service.add_installments(USER, "missing", "Saldo", Decimal("100"), 2, date(2024, 8, 1))

        assert revenue_service.list_revenue_items(USER) == []

    def test_quick_gain(self, revenue_service, sample_project):
        item_id = revenue_service.quick_gain(
            USER, sample_project.id, "Sinal", Decimal("1500"), today=date(2024, 7, 10)
        )

        item = revenue_service.get_revenue_item(USER, item_id)
        assert item.planned_amount == Decimal("1500.00")
        assert item.received_amount == Decimal("1500.00")
        assert item.transaction_date == date(2024, 7, 10)

    def test_quick_gain_requires_positive_amount(self, revenue_service, sample_project):
        with pytest.raises(ValidationError):
            revenue_service.quick_gain(USER, sample_project.id, "Sinal", Decimal("0"))

    def test_register_receipt(self, revenue_service, sample_project):
        item_id = revenue_service.add_revenue_item(
            USER, sample_project.id, "Entrada", Decimal("5000"), date(2024, 7, 15)
        )

        revenue_service.register_receipt(USER, item_id)

        assert revenue_service.get_revenue_item(USER, item_id).received_amount == Decimal("5000.00")

    def test_register_partial_receipt(self, revenue_service, sample_project):
        item_id = revenue_service.add_revenue_item(
            USER, sample_project.id, "Entrada", Decimal("5000"), date(2024, 7, 15)
        )

        revenue_service.register_receipt(USER, item_id, Decimal("4000"))

        assert revenue_service.get_revenue_item(USER, item_id).received_amount == Decimal("4000.00")

    def test_list_sorted_by_status(self, revenue_service, sample_project):
        today = date(2024, 7, 10)
        revenue_service.add_revenue_item(USER, sample_project.id, "Futura", Decimal("10"), date(2024, 8, 1))
        revenue_service.add_revenue_item(
            USER, sample_project.id, "Recebida", Decimal("10"), date(2024, 7, 1),
            received_amount=Decimal("10"),
        )
        revenue_service.add_revenue_item(USER, sample_project.id, "Vencida", Decimal("10"), date(2024, 7, 2))

        items = revenue_service.list_revenue_items(USER, today=today)

        assert [i.name for i in items] == ["Vencida", "Futura", "Recebida"]

    def test_delete_missing(self, revenue_service):
        with pytest.raises(NotFoundError):
            revenue_service.delete_revenue_item(USER, "missing")


class TestRevenueCommands:
    """Tests for revenue CLI commands."""

    def _invoke(self, cli_runner, temp_db, *args, **kwargs):
        return cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "--user", USER, *args], **kwargs
        )

    def test_revenue_add(self, cli_runner, temp_db, sample_project):
        result = self._invoke(
            cli_runner, temp_db,
            "revenue", "add", "Entrada",
            "--project", "Casa Verde", "--amount", "5000", "--date", "2024-07-15",
        )

        assert result.exit_code == 0
        assert "Created revenue item 'Entrada'" in result.output

    def test_revenue_add_installments(self, cli_runner, temp_db, sample_project):
        result = self._invoke(
            cli_runner, temp_db,
            "revenue", "add", "Saldo",
            "--project", sample_project.id, "--amount", "1000",
            "--date", "2024-07-31", "--installments", "3",
        )

        assert result.exit_code == 0
        assert "Created 3 installments for 'Saldo'" in result.output
        assert "Saldo - Parcela 3/3" in result.output
        assert "R$ 333.34" in result.output

    def test_revenue_add_unknown_project(self, cli_runner, temp_db):
        result = self._invoke(
            cli_runner, temp_db, "revenue", "add", "Entrada", "--project", "Nada", "--amount", "10"
        )

        assert result.exit_code != 0
        assert "Project 'Nada' not found" in result.output

    def test_revenue_quick(self, cli_runner, temp_db, sample_project):
        result = self._invoke(
            cli_runner, temp_db, "revenue", "quick", "Sinal", "--project", "Casa Verde", "--amount", "1500"
        )

        assert result.exit_code == 0
        assert "Recorded gain 'Sinal' of R$ 1,500.00" in result.output

    def test_revenue_list_and_receive(self, cli_runner, temp_db, revenue_service, sample_project):
        item_id = revenue_service.add_revenue_item(
            USER, sample_project.id, "Entrada", Decimal("5000"), date(2024, 7, 1)
        )

        listed = self._invoke(cli_runner, temp_db, "revenue", "list", "--as-of", "2024-07-10")
        assert listed.exit_code == 0
        assert "Found 1 revenue item(s)" in listed.output
        assert "Atrasado" in listed.output

        received = self._invoke(cli_runner, temp_db, "revenue", "receive", item_id)
        assert received.exit_code == 0
        assert f"Registered receipt for revenue item {item_id}" in received.output

        listed = self._invoke(cli_runner, temp_db, "revenue", "list", "--as-of", "2024-07-10")
        assert "Recebido" in listed.output
        assert "Received: R$ 5,000.00" in listed.output

    def test_revenue_list_empty(self, cli_runner, temp_db):
        result = self._invoke(cli_runner, temp_db, "revenue", "list")

        assert result.exit_code == 0
        assert "No revenue items found." in result.output

    def test_revenue_delete(self, cli_runner, temp_db, revenue_service, sample_project):
        item_id = revenue_service.add_revenue_item(
            USER, sample_project.id, "Entrada", Decimal("5000"), date(2024, 7, 1)
        )

        result = self._invoke(cli_runner, temp_db, "revenue", "delete", item_id, "--yes")

        assert result.exit_code == 0
        assert f"Deleted revenue item {item_id}" in result.output
