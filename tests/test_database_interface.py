"""Tests for the Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from finestra.domain import entities
from finestra.domain.entities import CostItemDraft, Frequency, ProjectStatus, RevenueItemDraft
from finestra.domain.errors import ConflictError, NotFoundError, StoreError, ValidationError
from finestra.domain.installments import cost_installment_drafts, revenue_installment_drafts

USER = "user-1"
OTHER_USER = "user-2"


def _create_project(db, user_id=USER, name="Casa Verde", client="Ana Souza", start=date(2024, 7, 1)):
    return db.create_project(
        user_id=user_id,
        name=name,
        client=client,
        start_date=start,
        status=ProjectStatus.PENDENTE,
        planned_total_revenue=Decimal("15000.00"),
        planned_total_cost=Decimal("9000.00"),
    )


def _draft(name="Tijolos", planned="100.00", when=date(2024, 7, 10), **kwargs):
    return CostItemDraft(
        name=name,
        category="Materiais",
        planned_amount=Decimal(planned),
        transaction_date=when,
        **kwargs,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_project_returns_domain_model(self, temp_db):
        """Test that get_project returns a domain Project entity."""
        project_id = _create_project(temp_db)

        project = temp_db.get_project(USER, project_id)

        assert isinstance(project, entities.Project)
        assert project.id == project_id
        assert project.status == ProjectStatus.PENDENTE
        assert project.planned_total_revenue == Decimal("15000.00")
        assert project.actual_total_cost == Decimal("0.00")
        assert isinstance(project.created_at, datetime)

    def test_ids_are_opaque_strings(self, temp_db):
        first = _create_project(temp_db)
        second = _create_project(temp_db, name="Loja Azul")

        assert isinstance(first, str)
        assert first != second

    def test_list_projects_newest_first(self, temp_db):
        _create_project(temp_db, name="Antigo", start=date(2023, 1, 1))
        _create_project(temp_db, name="Novo", start=date(2024, 1, 1))

        projects = temp_db.list_projects(USER)

        assert [p.name for p in projects] == ["Novo", "Antigo"]
        assert all(isinstance(p, entities.Project) for p in projects)

    def test_list_projects_search_matches_name_or_client(self, temp_db):
        _create_project(temp_db, name="Casa Verde", client="Ana")
        _create_project(temp_db, name="Loja Azul", client="Bruno Verdi")
        _create_project(temp_db, name="Escritório", client="Carla")

        assert {p.name for p in temp_db.list_projects(USER, search="verd")} == {
            "Casa Verde",
            "Loja Azul",
        }

    def test_get_cost_item_returns_domain_model(self, temp_db):
        [item_id] = temp_db.create_cost_items(USER, [_draft(supplier="Depósito")])

        item = temp_db.get_cost_item(USER, item_id)

        assert isinstance(item, entities.CostItem)
        assert item.status == entities.CostItemStatus.PENDENTE
        assert item.planned_amount == Decimal("100.00")
        assert item.actual_amount == Decimal("0.00")
        assert item.supplier == "Depósito"
        assert item.project_id is None
        assert item.frequency is None

    def test_list_cost_items_filters(self, temp_db):
        project_id = _create_project(temp_db)
        temp_db.create_cost_items(
            USER,
            [
                _draft(name="Projeto", project_id=project_id, when=date(2024, 7, 5)),
                _draft(name="Empresa", when=date(2024, 7, 20)),
                _draft(name="Antigo", when=date(2024, 6, 1)),
            ],
        )

        by_project = temp_db.list_cost_items(USER, project_id=project_id)
        company = temp_db.list_cost_items(USER, company_only=True)
        july = temp_db.list_cost_items(
            USER, start_date=date(2024, 7, 1), end_date=date(2024, 7, 31)
        )

        assert [i.name for i in by_project] == ["Projeto"]
        assert [i.name for i in company] == ["Antigo", "Empresa"]
        assert [i.name for i in july] == ["Projeto", "Empresa"]

    def test_get_revenue_item_returns_domain_model(self, temp_db):
        project_id = _create_project(temp_db)
        [item_id] = temp_db.create_revenue_items(
            USER,
            project_id,
            [
                RevenueItemDraft(
                    name="Entrada",
                    planned_amount=Decimal("5000"),
                    transaction_date=date(2024, 7, 15),
                    payment_method="PIX",
                )
            ],
        )

        item = temp_db.get_revenue_item(USER, item_id)

        assert isinstance(item, entities.RevenueItem)
        assert item.project_id == project_id
        assert item.planned_amount == Decimal("5000.00")
        assert item.received_amount == Decimal("0.00")
        assert item.payment_method == "PIX"

    def test_get_fixed_cost_returns_domain_model(self, temp_db):
        fixed_cost_id = temp_db.create_fixed_cost(
            user_id=USER,
            name="Aluguel",
            category="Outros",
            amount=Decimal("2500"),
            next_payment_date=date(2024, 8, 5),
            frequency=Frequency.ANNUALLY,
        )

        fixed_cost = temp_db.get_fixed_cost(USER, fixed_cost_id)

        assert isinstance(fixed_cost, entities.FixedCost)
        assert fixed_cost.frequency == Frequency.ANNUALLY
        assert fixed_cost.amount == Decimal("2500.00")

    def test_categories_returned_sorted(self, temp_db):
        temp_db.create_category(USER, "Software")
        temp_db.create_category(USER, "Materiais")

        categories = temp_db.list_categories(USER)

        assert [c.name for c in categories] == ["Materiais", "Software"]
        assert all(isinstance(c, entities.CostCategory) for c in categories)


class TestUserScoping:
    def test_other_users_project_is_invisible(self, temp_db):
        project_id = _create_project(temp_db)

        assert temp_db.get_project(OTHER_USER, project_id) is None
        assert temp_db.list_projects(OTHER_USER) == []

    def test_other_user_cannot_update_or_delete(self, temp_db):
        project_id = _create_project(temp_db)
        [item_id] = temp_db.create_cost_items(USER, [_draft()])

        with pytest.raises(NotFoundError):
            temp_db.update_project(OTHER_USER, project_id, name="Hijacked")
        with pytest.raises(NotFoundError):
            temp_db.delete_cost_item(OTHER_USER, item_id)

        assert temp_db.get_project(USER, project_id).name == "Casa Verde"
        assert temp_db.get_cost_item(USER, item_id) is not None

    def test_revenue_under_another_users_project(self, temp_db):
        project_id = _create_project(temp_db)
        draft = RevenueItemDraft(
            name="Entrada", planned_amount=Decimal("10"), transaction_date=date(2024, 7, 1)
        )

        with pytest.raises(NotFoundError):
            temp_db.create_revenue_items(OTHER_USER, project_id, [draft])

    def test_categories_are_per_user(self, temp_db):
        temp_db.create_category(USER, "Materiais")
        temp_db.create_category(OTHER_USER, "Materiais")

        assert [c.name for c in temp_db.list_categories(OTHER_USER)] == ["Materiais"]


class TestWrites:
    def test_batch_is_all_or_nothing(self, temp_db):
        # The second row violates NOT NULL on name
        drafts = [_draft(name="Parcela 1"), _draft(name=None)]

        with pytest.raises(StoreError):
            temp_db.create_cost_items(USER, drafts)

        assert temp_db.list_cost_items(USER) == []

    def test_store_stays_usable_after_failed_write(self, temp_db):
        with pytest.raises(StoreError):
            temp_db.create_cost_items(USER, [_draft(name=None)])

        [item_id] = temp_db.create_cost_items(USER, [_draft()])

        assert temp_db.get_cost_item(USER, item_id) is not None

    def test_update_rejects_unknown_fields(self, temp_db):
        project_id = _create_project(temp_db)

        with pytest.raises(ValidationError):
            temp_db.update_project(USER, project_id, user_id=OTHER_USER)

    def test_update_accepts_enum_values(self, temp_db):
        project_id = _create_project(temp_db)

        temp_db.update_project(USER, project_id, status=ProjectStatus.CONCLUIDO)

        assert temp_db.get_project(USER, project_id).status == ProjectStatus.CONCLUIDO

    def test_duplicate_category_conflicts(self, temp_db):
        temp_db.create_category(USER, "Materiais")

        with pytest.raises(ConflictError):
            temp_db.create_category(USER, "Materiais")

    def test_replayed_installment_batch_is_not_duplicated(self, temp_db):
        drafts = cost_installment_drafts(
            "Notebook", "Software", Decimal("300"), 3, date(2024, 7, 5), group_id="batch-1"
        )

        first = temp_db.create_cost_items(USER, drafts)
        second = temp_db.create_cost_items(USER, drafts)

        assert second == first
        assert len(temp_db.list_cost_items(USER)) == 3

    def test_replayed_batch_with_different_plan_conflicts(self, temp_db):
        temp_db.create_cost_items(
            USER,
            cost_installment_drafts(
                "Notebook", "Software", Decimal("300"), 3, date(2024, 7, 5), group_id="batch-1"
            ),
        )

        with pytest.raises(ConflictError):
            temp_db.create_cost_items(
                USER,
                cost_installment_drafts(
                    "Notebook", "Software", Decimal("300"), 4, date(2024, 7, 5), group_id="batch-1"
                ),
            )

        assert len(temp_db.list_cost_items(USER)) == 3

    def test_same_group_id_is_scoped_by_user(self, temp_db):
        drafts = cost_installment_drafts(
            "Notebook", "Software", Decimal("300"), 3, date(2024, 7, 5), group_id="batch-1"
        )

        temp_db.create_cost_items(USER, drafts)
        temp_db.create_cost_items(OTHER_USER, drafts)

        assert len(temp_db.list_cost_items(OTHER_USER)) == 3

    def test_replayed_revenue_batch_is_not_duplicated(self, temp_db):
        project_id = _create_project(temp_db)
        drafts = revenue_installment_drafts(
            "Saldo", Decimal("900"), 3, date(2024, 8, 1), group_id="batch-2"
        )

        first = temp_db.create_revenue_items(USER, project_id, drafts)
        second = temp_db.create_revenue_items(USER, project_id, drafts)

        assert second == first
        assert len(temp_db.list_revenue_items(USER, project_id)) == 3

    def test_deleting_project_leaves_items(self, temp_db):
        project_id = _create_project(temp_db)
        [cost_id] = temp_db.create_cost_items(USER, [_draft(project_id=project_id)])
        [revenue_id] = temp_db.create_revenue_items(
            USER,
            project_id,
            [RevenueItemDraft(name="Entrada", planned_amount=Decimal("10"), transaction_date=date(2024, 7, 1))],
        )

        temp_db.delete_project(USER, project_id)

        assert temp_db.get_project(USER, project_id) is None
        assert temp_db.get_cost_item(USER, cost_id).project_id == project_id
        assert temp_db.get_revenue_item(USER, revenue_id).project_id == project_id

    def test_delete_missing_rows(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_project(USER, "missing")
        with pytest.raises(NotFoundError):
            temp_db.delete_revenue_item(USER, "missing")
        with pytest.raises(NotFoundError):
            temp_db.delete_fixed_cost(USER, "missing")


class TestFixedCostGeneration:
    @pytest.fixture
    def fixed_cost_id(self, temp_db):
        return temp_db.create_fixed_cost(
            user_id=USER,
            name="Aluguel",
            category="Outros",
            amount=Decimal("2500"),
            next_payment_date=date(2024, 1, 31),
        )

    def test_creates_item_and_advances_template(self, temp_db, fixed_cost_id):
        draft = _draft(
            name="Aluguel",
            planned="2500",
            when=date(2024, 1, 31),
            is_recurring=True,
            frequency=Frequency.MONTHLY,
            fixed_cost_id=fixed_cost_id,
        )

        item_id = temp_db.record_fixed_cost_generation(
            USER, fixed_cost_id, draft, date(2024, 2, 29)
        )

        item = temp_db.get_cost_item(USER, item_id)
        assert item.fixed_cost_id == fixed_cost_id
        assert item.is_recurring is True
        assert item.frequency == Frequency.MONTHLY
        assert temp_db.get_fixed_cost(USER, fixed_cost_id).next_payment_date == date(2024, 2, 29)

    def test_stale_template_conflicts_and_writes_nothing(self, temp_db, fixed_cost_id):
        draft = _draft(name="Aluguel", when=date(2023, 12, 31), fixed_cost_id=fixed_cost_id)

        with pytest.raises(ConflictError):
            temp_db.record_fixed_cost_generation(USER, fixed_cost_id, draft, date(2024, 1, 31))

        assert temp_db.list_cost_items(USER) == []
        assert temp_db.get_fixed_cost(USER, fixed_cost_id).next_payment_date == date(2024, 1, 31)

    def test_missing_template(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.record_fixed_cost_generation(USER, "missing", _draft(), date(2024, 8, 10))
