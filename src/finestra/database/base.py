"""Abstract store interface.

Every operation is scoped by ``user_id``; records owned by another user are
reported as missing. Multi-record writes are all-or-nothing.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from finestra.domain.entities import (
    CostCategory,
    CostItem,
    CostItemDraft,
    FixedCost,
    Frequency,
    Project,
    ProjectStatus,
    RevenueItem,
    RevenueItemDraft,
)


class Database(ABC):
    """Abstract store interface for finestra."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        user_id: str,
        name: str,
        client: str,
        start_date: date,
        status: ProjectStatus,
        planned_total_revenue: Decimal,
        planned_total_cost: Decimal,
        description: Optional[str] = None,
    ) -> str:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, user_id: str, project_id: str) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, user_id: str, search: Optional[str] = None) -> list[Project]:
        """List projects, optionally matching name or client."""
        pass

    @abstractmethod
    def update_project(self, user_id: str, project_id: str, **fields: Any) -> None:
        """Update project fields."""
        pass

    @abstractmethod
    def delete_project(self, user_id: str, project_id: str) -> None:
        """Delete a project. Its cost and revenue items are left in place."""
        pass

    # Cost item operations
    @abstractmethod
    def create_cost_items(
        self, user_id: str, drafts: Sequence[CostItemDraft]
    ) -> list[str]:
        """Create cost items in one transaction. Returns their IDs in order.

        Replaying a batch whose installment group is already stored writes
        nothing and returns the stored IDs.
        """
        pass

    @abstractmethod
    def get_cost_item(self, user_id: str, item_id: str) -> Optional[CostItem]:
        """Get cost item by ID."""
        pass

    @abstractmethod
    def list_cost_items(
        self,
        user_id: str,
        project_id: Optional[str] = None,
        company_only: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CostItem]:
        """List cost items with optional filters.

        Args:
            user_id: Owner
            project_id: Only items of this project
            company_only: Only items without a project
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
        """
        pass

    @abstractmethod
    def update_cost_item(self, user_id: str, item_id: str, **fields: Any) -> None:
        """Update cost item fields."""
        pass

    @abstractmethod
    def delete_cost_item(self, user_id: str, item_id: str) -> None:
        """Delete a cost item."""
        pass

    # Revenue item operations
    @abstractmethod
    def create_revenue_items(
        self, user_id: str, project_id: str, drafts: Sequence[RevenueItemDraft]
    ) -> list[str]:
        """Create revenue items under a project in one transaction.

        Replaying a batch whose installment group is already stored writes
        nothing and returns the stored IDs.
        """
        pass

    @abstractmethod
    def get_revenue_item(self, user_id: str, item_id: str) -> Optional[RevenueItem]:
        """Get revenue item by ID."""
        pass

    @abstractmethod
    def list_revenue_items(
        self,
        user_id: str,
        project_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[RevenueItem]:
        """List revenue items, optionally for one project."""
        pass

    @abstractmethod
    def update_revenue_item(self, user_id: str, item_id: str, **fields: Any) -> None:
        """Update revenue item fields."""
        pass

    @abstractmethod
    def delete_revenue_item(self, user_id: str, item_id: str) -> None:
        """Delete a revenue item."""
        pass

    # Fixed cost operations
    @abstractmethod
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
        """Create a fixed cost template. Returns its ID."""
        pass

    @abstractmethod
    def get_fixed_cost(self, user_id: str, fixed_cost_id: str) -> Optional[FixedCost]:
        """Get fixed cost by ID."""
        pass

    @abstractmethod
    def list_fixed_costs(self, user_id: str) -> list[FixedCost]:
        """List fixed costs."""
        pass

    @abstractmethod
    def update_fixed_cost(self, user_id: str, fixed_cost_id: str, **fields: Any) -> None:
        """Update fixed cost fields."""
        pass

    @abstractmethod
    def delete_fixed_cost(self, user_id: str, fixed_cost_id: str) -> None:
        """Delete a fixed cost. Payables it generated are kept."""
        pass

    @abstractmethod
    def record_fixed_cost_generation(
        self,
        user_id: str,
        fixed_cost_id: str,
        draft: CostItemDraft,
        next_payment_date: date,
    ) -> str:
        """Create the generated cost item and advance the template together.

        The template must still be due on ``draft.transaction_date``;
        otherwise nothing is written and ConflictError is raised.
        Returns the new cost item ID.
        """
        pass

    # User operations
    @abstractmethod
    def register_user(self, user_id: str) -> bool:
        """Record a user on first use. Returns True if the user is new."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: str, name: str) -> str:
        """Create a cost category. Returns its ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, user_id: str, name: str) -> Optional[CostCategory]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self, user_id: str) -> list[CostCategory]:
        """List categories by name."""
        pass

    @abstractmethod
    def delete_category(self, user_id: str, category_id: str) -> None:
        """Delete a category. Items keep their category label."""
        pass
