"""Revenue item (receivable) domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from finestra.database.base import Database
from finestra.domain.entities import RevenueItem, RevenueItemDraft
from finestra.domain.errors import NotFoundError, ValidationError, revenue_item_not_found
from finestra.domain.installments import revenue_installment_drafts
from finestra.domain.status import sort_by_status
from finestra.domain.validation import (
    optional_text,
    require_name,
    require_non_negative,
    require_positive,
)

logger = logging.getLogger(__name__)


class RevenueService:
    """Service for managing receivables. Every receivable belongs to a project."""

    def __init__(self, db: Database):
        """Initialize revenue service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_revenue_item(
        self,
        user_id: str,
        project_id: str,
        name: str,
        planned_amount: Decimal,
        transaction_date: date,
        received_amount: Decimal = Decimal("0"),
        payment_method: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        """Create a single receivable under a project.

        Returns:
            Revenue item ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the project does not exist
        """
        if transaction_date is None:
            raise ValidationError("Transaction date is required")
        draft = RevenueItemDraft(
            name=require_name(name),
            planned_amount=require_non_negative(planned_amount, "Planned amount"),
            received_amount=require_non_negative(received_amount, "Received amount"),
            transaction_date=transaction_date,
            payment_method=optional_text(payment_method),
            description=optional_text(description),
        )
        return self.db.create_revenue_items(user_id, project_id, [draft])[0]

    def add_installments(
        self,
        user_id: str,
        project_id: str,
        name: str,
        total_amount: Decimal,
        number_of_installments: int,
        first_installment_date: date,
        payment_method: Optional[str] = None,
        description: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> list[str]:
        """Split a total into monthly receivables, written together.

        Passing the group_id of an earlier call replays it: the existing
        items are returned and nothing new is written.

        Returns:
            Revenue item IDs in installment order

        Raises:
            ValidationError: If the plan is invalid. Nothing is written.
            NotFoundError: If the project does not exist
        """
        drafts = revenue_installment_drafts(
            name=require_name(name),
            total_amount=total_amount,
            number_of_installments=number_of_installments,
            first_installment_date=first_installment_date,
            payment_method=optional_text(payment_method),
            description=optional_text(description),
            group_id=group_id,
        )
        ids = self.db.create_revenue_items(user_id, project_id, drafts)
        logger.info(
            "Created %d revenue installments for '%s' (group %s)",
            len(ids),
            name,
            drafts[0].installment_group_id,
        )
        return ids

    def quick_gain(
        self,
        user_id: str,
        project_id: str,
        name: str,
        amount: Decimal,
        description: Optional[str] = None,
        today: Optional[date] = None,
    ) -> str:
        """Record revenue received today. Planned and received are both ``amount``."""
        amount = require_positive(amount)
        return self.add_revenue_item(
            user_id=user_id,
            project_id=project_id,
            name=name,
            planned_amount=amount,
            received_amount=amount,
            transaction_date=today or date.today(),
            description=description,
        )

    def get_revenue_item(self, user_id: str, item_id: str) -> Optional[RevenueItem]:
        """Get revenue item by ID."""
        return self.db.get_revenue_item(user_id, item_id)

    def list_revenue_items(
        self,
        user_id: str,
        project_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[RevenueItem]:
        """List receivables, overdue first, then pending, then received."""
        items = self.db.list_revenue_items(
            user_id, project_id=project_id, start_date=start_date, end_date=end_date
        )
        return sort_by_status(items, today or date.today())

    def register_receipt(
        self, user_id: str, item_id: str, received_amount: Optional[Decimal] = None
    ) -> None:
        """Record the amount received for a receivable.

        Args:
            user_id: Owner
            item_id: Revenue item ID
            received_amount: Amount received, defaults to the planned amount

        Raises:
            NotFoundError: If the item does not exist
            ValidationError: If the amount is negative
        """
        item = self.db.get_revenue_item(user_id, item_id)
        if item is None:
            raise NotFoundError(revenue_item_not_found(item_id))
        if received_amount is None:
            received_amount = item.planned_amount
        self.db.update_revenue_item(
            user_id,
            item_id,
            received_amount=require_non_negative(received_amount, "Received amount"),
        )

    def delete_revenue_item(self, user_id: str, item_id: str) -> None:
        """Delete a receivable.

        Raises:
            NotFoundError: If the item does not exist
        """
        self.db.delete_revenue_item(user_id, item_id)
