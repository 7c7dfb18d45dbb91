"""Dashboard domain service.

Each call loads a fresh snapshot of the user's records and runs the pure
metrics over it. Nothing is cached, so callers simply call again after any
change.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
from finestra.database.base import Database
from finestra.domain.entities import (
    CashFlowEntry,
    CategoryTotal,
    CostItem,
    MonthlyOverview,
    MonthlyPoint,
    PortfolioProgress,
    ProjectMetrics,
    ProjectSummary,
    RevenueItem,
    WeeklySummary,
)
from finestra.domain.metrics import (
    TRAILING_MONTHS,
    ZERO,
    cash_balance,
    cash_flow,
    cost_breakdown_by_category,
    monthly_cost_series,
    monthly_overview,
    monthly_revenue_series,
    portfolio_progress,
    project_metrics,
    project_summary,
    weekly_summary,
)
from finestra.domain.status import overdue, sort_by_status


@dataclass(frozen=True)
class DashboardCharts:
    """Series behind the report charts."""

    costs: list[MonthlyPoint]
    revenues: list[MonthlyPoint]
    categories: list[CategoryTotal]


@dataclass(frozen=True)
class OverdueItems:
    """Overdue payables and receivables, oldest first."""

    costs: list[CostItem]
    revenues: list[RevenueItem]


class DashboardService:
    """Service computing dashboard figures for one user."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def portfolio_metrics(self, user_id: str) -> ProjectMetrics:
        """Realised revenue, cost, profit and margin over every item."""
        return project_metrics(
            self.db.list_revenue_items(user_id), self.db.list_cost_items(user_id)
        )

    def overview(self, user_id: str, month: Optional[date] = None) -> MonthlyOverview:
        """Key metrics for ``month`` (default: the current month)."""
        return monthly_overview(
            self.db.list_revenue_items(user_id),
            self.db.list_cost_items(user_id),
            self.db.list_projects(user_id),
            month or date.today(),
        )

    def week(self, user_id: str, today: Optional[date] = None) -> WeeklySummary:
        """Pending payments and receipts due this week."""
        return weekly_summary(
            self.db.list_cost_items(user_id),
            self.db.list_revenue_items(user_id),
            today or date.today(),
        )

    def overdue(self, user_id: str, today: Optional[date] = None) -> OverdueItems:
        """Everything past due and still open, whatever the week."""
        today = today or date.today()
        costs = overdue(self.db.list_cost_items(user_id), today)
        revenues = overdue(self.db.list_revenue_items(user_id), today)
        return OverdueItems(
            costs=sort_by_status(costs, today),
            revenues=sort_by_status(revenues, today),
        )

    def cash_flow(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CashFlowEntry]:
        """Merged ledger of receivables and payables, newest first."""
        return cash_flow(
            self.db.list_cost_items(user_id, start_date=start_date, end_date=end_date),
            self.db.list_revenue_items(user_id, start_date=start_date, end_date=end_date),
            self.db.list_projects(user_id),
        )

    def balance(
        self,
        user_id: str,
        initial_balance: Decimal = ZERO,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Cash position after settled receipts and payments."""
        return cash_balance(self.cash_flow(user_id, start_date, end_date), initial_balance)

    def charts(
        self,
        user_id: str,
        today: Optional[date] = None,
        months: int = TRAILING_MONTHS,
        project_id: Optional[str] = None,
    ) -> DashboardCharts:
        """Monthly cost and revenue series plus the category breakdown."""
        today = today or date.today()
        costs = self.db.list_cost_items(user_id, project_id=project_id)
        revenues = self.db.list_revenue_items(user_id, project_id=project_id)
        return DashboardCharts(
            costs=monthly_cost_series(costs, today, months),
            revenues=monthly_revenue_series(revenues, today, months),
            categories=cost_breakdown_by_category(costs),
        )

    def projects(self, user_id: str) -> list[ProjectSummary]:
        """Rows of the projects table."""
        return [project_summary(p) for p in self.db.list_projects(user_id)]

    def progress(self, user_id: str) -> PortfolioProgress:
        """Average project progress and status counts."""
        return portfolio_progress(self.db.list_projects(user_id))
