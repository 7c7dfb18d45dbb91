"""Cost item (payable) domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from finestra.database.base import Database
from finestra.domain.category import CategoryService
from finestra.domain.entities import CostItem, CostItemDraft, CostItemStatus
from finestra.domain.errors import (
    NotFoundError,
    ValidationError,
    cost_item_not_found,
    project_not_found,
)
from finestra.domain.installments import cost_installment_drafts
from finestra.domain.status import sort_by_status
from finestra.domain.validation import (
    optional_text,
    require_name,
    require_non_negative,
    require_positive,
    require_status,
)

logger = logging.getLogger(__name__)


class CostService:
    """Service for managing payables, with or without a project."""

    def __init__(self, db: Database):
        """Initialize cost service.

        Args:
            db: Database instance
        """
        self.db = db
        self.categories = CategoryService(db)

    def _check_project(self, user_id: str, project_id: Optional[str]) -> None:
        if project_id is not None and self.db.get_project(user_id, project_id) is None:
            raise NotFoundError(project_not_found(project_id))

    def add_cost_item(
        self,
        user_id: str,
        name: str,
        category: str,
        planned_amount: Decimal,
        transaction_date: date,
        actual_amount: Decimal = Decimal("0"),
        status: CostItemStatus = CostItemStatus.PENDENTE,
        project_id: Optional[str] = None,
        supplier: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        """Create a single payable.

        Args:
            user_id: Owner
            name: Item name
            category: Existing category name
            planned_amount: Expected amount, not negative
            transaction_date: Due date
            actual_amount: Amount actually paid so far, not negative
            status: Persisted status
            project_id: Owning project, None for a company cost
            supplier: Optional supplier
            description: Optional description

        Returns:
            Cost item ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the project does not exist
        """
        if transaction_date is None:
            raise ValidationError("Transaction date is required")
        draft = CostItemDraft(
            name=require_name(name),
            category=self.categories.require_category(user_id, category),
            planned_amount=require_non_negative(planned_amount, "Planned amount"),
            actual_amount=require_non_negative(actual_amount, "Actual amount"),
            status=require_status(status, CostItemStatus),
            transaction_date=transaction_date,
            project_id=project_id,
            supplier=optional_text(supplier),
            description=optional_text(description),
        )
        self._check_project(user_id, project_id)
        return self.db.create_cost_items(user_id, [draft])[0]

    def add_installments(
        self,
        user_id: str,
        name: str,
        category: str,
        total_amount: Decimal,
        number_of_installments: int,
        first_installment_date: date,
        project_id: Optional[str] = None,
        supplier: Optional[str] = None,
        description: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> list[str]:
        """Split a total into monthly payables, written together.

        Passing the group_id of an earlier call replays it: the existing
        items are returned and nothing new is written.

        Returns:
            Cost item IDs in installment order

        Raises:
            ValidationError: If the plan or category is invalid. Nothing is
                written in that case.
            NotFoundError: If the project does not exist
        """
        drafts = cost_installment_drafts(
            name=require_name(name),
            category=self.categories.require_category(user_id, category),
            total_amount=total_amount,
            number_of_installments=number_of_installments,
            first_installment_date=first_installment_date,
            project_id=project_id,
            supplier=optional_text(supplier),
            description=optional_text(description),
            group_id=group_id,
        )
        self._check_project(user_id, project_id)
        ids = self.db.create_cost_items(user_id, drafts)
        logger.info(
            "Created %d cost installments for '%s' (group %s)",
            len(ids),
            name,
            drafts[0].installment_group_id,
        )
        return ids

    def quick_expense(
        self,
        user_id: str,
        name: str,
        category: str,
        amount: Decimal,
        project_id: Optional[str] = None,
        description: Optional[str] = None,
        today: Optional[date] = None,
    ) -> str:
        """Record an expense already paid today.

        Planned and actual amounts are both ``amount`` and the status is Pago.
        """
        amount = require_positive(amount)
        return self.add_cost_item(
            user_id=user_id,
            name=name,
            category=category,
            planned_amount=amount,
            actual_amount=amount,
            status=CostItemStatus.PAGO,
            transaction_date=today or date.today(),
            project_id=project_id,
            description=description,
        )

    def get_cost_item(self, user_id: str, item_id: str) -> Optional[CostItem]:
        """Get cost item by ID."""
        return self.db.get_cost_item(user_id, item_id)

    def list_cost_items(
        self,
        user_id: str,
        project_id: Optional[str] = None,
        company_only: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[CostItem]:
        """List payables, overdue first, then pending, then paid."""
        items = self.db.list_cost_items(
            user_id,
            project_id=project_id,
            company_only=company_only,
            start_date=start_date,
            end_date=end_date,
        )
        return sort_by_status(items, today or date.today())

    def mark_paid(
        self, user_id: str, item_id: str, actual_amount: Optional[Decimal] = None
    ) -> None:
        """Mark a payable as paid.

        Args:
            user_id: Owner
            item_id: Cost item ID
            actual_amount: Amount paid, defaults to the planned amount

        Raises:
            NotFoundError: If the item does not exist
            ValidationError: If the amount is negative
        """
        item = self.db.get_cost_item(user_id, item_id)
        if item is None:
            raise NotFoundError(cost_item_not_found(item_id))
        if actual_amount is None:
            actual_amount = item.planned_amount
        self.db.update_cost_item(
            user_id,
            item_id,
            status=CostItemStatus.PAGO,
            actual_amount=require_non_negative(actual_amount, "Actual amount"),
        )

    def delete_cost_item(self, user_id: str, item_id: str) -> None:
        """Delete a payable.

        Raises:
            NotFoundError: If the item does not exist
        """
        self.db.delete_cost_item(user_id, item_id)
