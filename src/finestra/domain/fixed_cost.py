"""Fixed cost domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from finestra.database.base import Database
from finestra.domain.category import CategoryService
from finestra.domain.entities import FixedCost, Frequency
from finestra.domain.errors import NotFoundError, ValidationError, fixed_cost_not_found
from finestra.domain.recurrence import advance_payment_date, build_generated_cost_item
from finestra.domain.validation import optional_text, require_name, require_positive

logger = logging.getLogger(__name__)


class FixedCostService:
    """Service for managing recurring company cost templates."""

    def __init__(self, db: Database):
        """Initialize fixed cost service.

        Args:
            db: Database instance
        """
        self.db = db
        self.categories = CategoryService(db)

    def create_fixed_cost(
        self,
        user_id: str,
        name: str,
        category: str,
        amount: Decimal,
        next_payment_date: date,
        frequency: Frequency = Frequency.MONTHLY,
        description: Optional[str] = None,
    ) -> str:
        """Create a fixed cost template.

        Returns:
            Fixed cost ID

        Raises:
            ValidationError: If any field is invalid
        """
        if next_payment_date is None:
            raise ValidationError("Next payment date is required")
        return self.db.create_fixed_cost(
            user_id=user_id,
            name=require_name(name),
            category=self.categories.require_category(user_id, category),
            amount=require_positive(amount),
            next_payment_date=next_payment_date,
            frequency=Frequency(frequency),
            description=optional_text(description),
        )

    def get_fixed_cost(self, user_id: str, fixed_cost_id: str) -> Optional[FixedCost]:
        """Get fixed cost by ID."""
        return self.db.get_fixed_cost(user_id, fixed_cost_id)

    def list_fixed_costs(self, user_id: str) -> list[FixedCost]:
        """List templates by next payment date."""
        return self.db.list_fixed_costs(user_id)

    def generate(self, user_id: str, fixed_cost_id: str) -> str:
        """Generate the next payable and advance the template by one period.

        Both writes happen in one transaction. Calling this twice generates
        two payables and advances the date twice.

        Returns:
            ID of the generated cost item

        Raises:
            NotFoundError: If the template does not exist
            ConflictError: If the template moved on since it was read
        """
        fixed_cost = self.db.get_fixed_cost(user_id, fixed_cost_id)
        if fixed_cost is None:
            raise NotFoundError(fixed_cost_not_found(fixed_cost_id))

        draft = build_generated_cost_item(fixed_cost)
        next_date = advance_payment_date(fixed_cost.next_payment_date, fixed_cost.frequency)
        item_id = self.db.record_fixed_cost_generation(
            user_id, fixed_cost_id, draft, next_date
        )
        logger.info(
            "Generated cost item %s from fixed cost %s due %s, next due %s",
            item_id,
            fixed_cost_id,
            draft.transaction_date,
            next_date,
        )
        return item_id

    def delete_fixed_cost(self, user_id: str, fixed_cost_id: str) -> None:
        """Delete a template. Payables it already generated are kept.

        Raises:
            NotFoundError: If the template does not exist
        """
        self.db.delete_fixed_cost(user_id, fixed_cost_id)
