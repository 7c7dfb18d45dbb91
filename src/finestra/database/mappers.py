"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the engine keeps working on
plain records whatever the table layout looks like.
"""

from decimal import Decimal
from typing import Optional

from finestra.domain import entities as domain
from finestra.database.models import (
    Project as ORMProject,
    CostItem as ORMCostItem,
    RevenueItem as ORMRevenueItem,
    FixedCost as ORMFixedCost,
    CostCategory as ORMCostCategory,
)


def _amount(value) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(Decimal("0.01"))


def _frequency(value: Optional[str]) -> Optional[domain.Frequency]:
    return domain.Frequency(value) if value is not None else None


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        user_id=orm_project.user_id,
        name=orm_project.name,
        client=orm_project.client,
        start_date=orm_project.start_date,
        status=domain.ProjectStatus(orm_project.status),
        planned_total_revenue=_amount(orm_project.planned_total_revenue),
        planned_total_cost=_amount(orm_project.planned_total_cost),
        actual_total_cost=_amount(orm_project.actual_total_cost),
        actual_total_revenue=_amount(orm_project.actual_total_revenue),
        description=orm_project.description,
        created_at=orm_project.created_at,
        updated_at=orm_project.updated_at,
    )


def cost_item_to_domain(orm_item: ORMCostItem) -> domain.CostItem:
    """Convert SQLAlchemy CostItem model to domain CostItem entity."""
    return domain.CostItem(
        id=orm_item.id,
        user_id=orm_item.user_id,
        project_id=orm_item.project_id,
        name=orm_item.name,
        supplier=orm_item.supplier,
        category=orm_item.category,
        status=domain.CostItemStatus(orm_item.status),
        planned_amount=_amount(orm_item.planned_amount),
        actual_amount=_amount(orm_item.actual_amount),
        transaction_date=orm_item.transaction_date,
        description=orm_item.description,
        is_installment=bool(orm_item.is_installment),
        installment_number=orm_item.installment_number,
        total_installments=orm_item.total_installments,
        installment_group_id=orm_item.installment_group_id,
        is_recurring=bool(orm_item.is_recurring),
        frequency=_frequency(orm_item.frequency),
        fixed_cost_id=orm_item.fixed_cost_id,
        deviation_analysis_note=orm_item.deviation_analysis_note,
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
    )


def revenue_item_to_domain(orm_item: ORMRevenueItem) -> domain.RevenueItem:
    """Convert SQLAlchemy RevenueItem model to domain RevenueItem entity."""
    return domain.RevenueItem(
        id=orm_item.id,
        user_id=orm_item.user_id,
        project_id=orm_item.project_id,
        name=orm_item.name,
        payment_method=orm_item.payment_method,
        planned_amount=_amount(orm_item.planned_amount),
        received_amount=_amount(orm_item.received_amount),
        transaction_date=orm_item.transaction_date,
        description=orm_item.description,
        is_installment=bool(orm_item.is_installment),
        installment_number=orm_item.installment_number,
        total_installments=orm_item.total_installments,
        installment_group_id=orm_item.installment_group_id,
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
    )


def fixed_cost_to_domain(orm_fixed_cost: ORMFixedCost) -> domain.FixedCost:
    """Convert SQLAlchemy FixedCost model to domain FixedCost entity."""
    return domain.FixedCost(
        id=orm_fixed_cost.id,
        user_id=orm_fixed_cost.user_id,
        name=orm_fixed_cost.name,
        category=orm_fixed_cost.category,
        amount=_amount(orm_fixed_cost.amount),
        frequency=domain.Frequency(orm_fixed_cost.frequency),
        next_payment_date=orm_fixed_cost.next_payment_date,
        description=orm_fixed_cost.description,
        created_at=orm_fixed_cost.created_at,
        updated_at=orm_fixed_cost.updated_at,
    )


def cost_category_to_domain(orm_category: ORMCostCategory) -> domain.CostCategory:
    """Convert SQLAlchemy CostCategory model to domain CostCategory entity."""
    return domain.CostCategory(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def cost_item_from_draft(user_id: str, draft: domain.CostItemDraft) -> ORMCostItem:
    """Build a SQLAlchemy CostItem row from a draft."""
    return ORMCostItem(
        user_id=user_id,
        project_id=draft.project_id,
        name=draft.name,
        supplier=draft.supplier,
        category=draft.category,
        status=domain.CostItemStatus(draft.status).value,
        planned_amount=draft.planned_amount,
        actual_amount=draft.actual_amount,
        transaction_date=draft.transaction_date,
        description=draft.description,
        is_installment=draft.is_installment,
        installment_number=draft.installment_number,
        total_installments=draft.total_installments,
        installment_group_id=draft.installment_group_id,
        is_recurring=draft.is_recurring,
        frequency=draft.frequency.value if draft.frequency is not None else None,
        fixed_cost_id=draft.fixed_cost_id,
    )


def revenue_item_from_draft(
    user_id: str, project_id: str, draft: domain.RevenueItemDraft
) -> ORMRevenueItem:
    """Build a SQLAlchemy RevenueItem row from a draft."""
    return ORMRevenueItem(
        user_id=user_id,
        project_id=project_id,
        name=draft.name,
        payment_method=draft.payment_method,
        planned_amount=draft.planned_amount,
        received_amount=draft.received_amount,
        transaction_date=draft.transaction_date,
        description=draft.description,
        is_installment=draft.is_installment,
        installment_number=draft.installment_number,
        total_installments=draft.total_installments,
        installment_group_id=draft.installment_group_id,
    )
