"""Aggregate metrics feeding the dashboards.

Every function is a pure reduction over collections that were already
loaded; callers re-run them whenever the underlying data changes.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from finestra.domain.entities import (
    CashFlowEntry,
    CategoryTotal,
    CostItem,
    CostItemStatus,
    MonthlyOverview,
    MonthlyPoint,
    PaymentStatus,
    PortfolioProgress,
    Project,
    ProjectMetrics,
    ProjectStatus,
    ProjectSummary,
    RevenueItem,
    TransactionType,
    WeeklySummary,
)
from finestra.domain.status import is_this_week, week_bounds
from finestra.utils.date_parser import month_start

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
TRAILING_MONTHS = 6
NO_PROJECT = "N/A"


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def actual_total_revenue(revenues: Iterable[RevenueItem]) -> Decimal:
    """Sum of received amounts."""
    return _sum(item.received_amount for item in revenues)


def actual_total_cost(costs: Iterable[CostItem]) -> Decimal:
    """Sum of actual amounts."""
    return _sum(item.actual_amount for item in costs)


def planned_total_cost(costs: Iterable[CostItem]) -> Decimal:
    """Sum of planned amounts."""
    return _sum(item.planned_amount for item in costs)


def margin_percentage(profit: Decimal, revenue: Decimal) -> Decimal:
    """Profit over revenue in percent, 0 when there is no revenue."""
    if revenue <= 0:
        return ZERO
    return profit / revenue * HUNDRED


def project_metrics(
    revenues: Sequence[RevenueItem], costs: Sequence[CostItem]
) -> ProjectMetrics:
    """Realised revenue, cost, profit and margin from child items."""
    revenue = actual_total_revenue(revenues)
    cost = actual_total_cost(costs)
    profit = revenue - cost
    return ProjectMetrics(
        actual_total_revenue=revenue,
        actual_total_cost=cost,
        actual_profit=profit,
        margin_percentage=margin_percentage(profit, revenue),
    )


def trailing_months(today: date, months: int = TRAILING_MONTHS) -> list[date]:
    """First days of the last ``months`` calendar months, oldest first."""
    current = month_start(today)
    return [current - relativedelta(months=offset) for offset in range(months - 1, -1, -1)]


def _monthly_series(items, today, months, actual_of) -> list[MonthlyPoint]:
    actual: dict[date, Decimal] = defaultdict(lambda: ZERO)
    planned: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for item in items:
        key = month_start(item.transaction_date)
        actual[key] += actual_of(item)
        planned[key] += item.planned_amount
    return [
        MonthlyPoint(month=month, actual=actual[month], planned=planned[month])
        for month in trailing_months(today, months)
    ]


def monthly_cost_series(
    costs: Iterable[CostItem], today: date, months: int = TRAILING_MONTHS
) -> list[MonthlyPoint]:
    """Actual vs planned cost per month over the trailing window."""
    return _monthly_series(costs, today, months, lambda item: item.actual_amount)


def monthly_revenue_series(
    revenues: Iterable[RevenueItem], today: date, months: int = TRAILING_MONTHS
) -> list[MonthlyPoint]:
    """Received vs planned revenue per month over the trailing window."""
    return _monthly_series(revenues, today, months, lambda item: item.received_amount)


def best_known_amount(item: CostItem) -> Decimal:
    """Actual amount once realised, planned amount before that."""
    return item.actual_amount if item.actual_amount > 0 else item.planned_amount


def cost_breakdown_by_category(costs: Iterable[CostItem]) -> list[CategoryTotal]:
    """Best known cost per category, largest first."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for item in costs:
        totals[item.category] += best_known_amount(item)
    return [
        CategoryTotal(category=category, value=value)
        for category, value in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def _in_month(value: date, month: date) -> bool:
    return month_start(value) == month_start(month)


def monthly_overview(
    revenues: Iterable[RevenueItem],
    costs: Iterable[CostItem],
    projects: Iterable[Project],
    month: date,
) -> MonthlyOverview:
    """Received revenue, actual cost and result for one calendar month."""
    revenue = actual_total_revenue(
        item for item in revenues if _in_month(item.transaction_date, month)
    )
    cost = actual_total_cost(
        item for item in costs if _in_month(item.transaction_date, month)
    )
    in_progress = sum(1 for p in projects if p.status == ProjectStatus.EM_ANDAMENTO)
    return MonthlyOverview(
        month=month_start(month),
        revenue=revenue,
        cost=cost,
        result=revenue - cost,
        projects_in_progress=in_progress,
    )


def weekly_summary(
    costs: Iterable[CostItem], revenues: Iterable[RevenueItem], today: date
) -> WeeklySummary:
    """Pending payables and receivables falling due this week."""
    payments = tuple(
        item
        for item in costs
        if item.status == CostItemStatus.PENDENTE and is_this_week(item, today)
    )
    receivables = tuple(
        item
        for item in revenues
        if item.received_amount == 0 and is_this_week(item, today)
    )
    monday, sunday = week_bounds(today)
    return WeeklySummary(
        week_start=monday,
        week_end=sunday,
        payments=payments,
        receivables=receivables,
        total_to_pay=_sum(item.planned_amount for item in payments),
        total_to_receive=_sum(item.planned_amount for item in receivables),
    )


def cash_flow(
    costs: Iterable[CostItem],
    revenues: Iterable[RevenueItem],
    projects: Iterable[Project],
) -> list[CashFlowEntry]:
    """Merged ledger of receivables and payables, newest first."""
    project_names = {project.id: project.name for project in projects}
    entries = []
    for item in revenues:
        received = item.received_amount > 0
        entries.append(
            CashFlowEntry(
                id=f"trans-rev-{item.id}",
                type=TransactionType.RECEITA,
                description=item.name,
                amount=item.received_amount if received else item.planned_amount,
                date=item.transaction_date,
                category=TransactionType.RECEITA.value,
                project=project_names.get(item.project_id, NO_PROJECT),
                status=PaymentStatus.RECEBIDO if received else PaymentStatus.PENDENTE,
            )
        )
    for item in costs:
        paid = item.status == CostItemStatus.PAGO or item.actual_amount > 0
        entries.append(
            CashFlowEntry(
                id=f"trans-cost-{item.id}",
                type=TransactionType.CUSTO,
                description=item.name,
                amount=best_known_amount(item),
                date=item.transaction_date,
                category=item.category,
                project=project_names.get(item.project_id, NO_PROJECT),
                status=PaymentStatus.PAGO if paid else PaymentStatus.PENDENTE,
            )
        )
    # Stable sort keeps revenues ahead of costs on the same day
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def cash_balance(
    entries: Iterable[CashFlowEntry], initial_balance: Decimal = ZERO
) -> Decimal:
    """Initial balance plus settled receipts minus settled payments."""
    balance = Decimal(initial_balance)
    for entry in entries:
        if entry.status == PaymentStatus.RECEBIDO:
            balance += entry.amount
        elif entry.status == PaymentStatus.PAGO:
            balance -= entry.amount
    return balance


def progress_percentage(project: Project) -> Decimal:
    """Received share of planned revenue, 0 when nothing is planned."""
    if project.planned_total_revenue <= 0:
        return ZERO
    return project.actual_total_revenue / project.planned_total_revenue * HUNDRED


def project_summary(project: Project) -> ProjectSummary:
    """Projects-table row built from the denormalised totals."""
    return ProjectSummary(
        project=project,
        predicted_profit=project.planned_total_revenue - project.planned_total_cost,
        actual_profit=project.actual_total_revenue - project.actual_total_cost,
        progress=progress_percentage(project),
    )


def portfolio_progress(projects: Sequence[Project]) -> PortfolioProgress:
    """Average progress and status counts across all projects."""
    if not projects:
        return PortfolioProgress(progress=ZERO, completed=0, in_progress=0, pending=0)
    completed = sum(1 for p in projects if p.status == ProjectStatus.CONCLUIDO)
    in_progress = sum(1 for p in projects if p.status == ProjectStatus.EM_ANDAMENTO)
    average = _sum(progress_percentage(p) for p in projects) / len(projects)
    return PortfolioProgress(
        progress=average,
        completed=completed,
        in_progress=in_progress,
        pending=len(projects) - completed - in_progress,
    )


def totals_drift(
    project: Project,
    revenues: Sequence[RevenueItem],
    costs: Sequence[CostItem],
) -> Optional[ProjectMetrics]:
    """Authoritative totals when the denormalised ones disagree, else None."""
    metrics = project_metrics(revenues, costs)
    if (
        metrics.actual_total_revenue == project.actual_total_revenue
        and metrics.actual_total_cost == project.actual_total_cost
    ):
        return None
    return metrics
