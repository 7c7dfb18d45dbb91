"""Domain model entities for finestra.

These are pure data classes representing business concepts, independent of
the store schema. The derivation engine only ever sees these records, so the
dashboards keep working whatever backs the store.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from finestra.domain.errors import ValidationError


class ProjectStatus(str, Enum):
    """Lifecycle of a project."""

    PENDENTE = "Pendente"
    EM_ANDAMENTO = "Em andamento"
    INSTALADO = "Instalado"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"


class CostItemStatus(str, Enum):
    """Persisted status of a payable."""

    PENDENTE = "Pendente"
    PAGO = "Pago"


class PaymentStatus(str, Enum):
    """Derived status label for payables and receivables. Never stored."""

    ATRASADO = "Atrasado"
    PENDENTE = "Pendente"
    PAGO = "Pago"
    RECEBIDO = "Recebido"


class Frequency(str, Enum):
    """Recurrence period."""

    MONTHLY = "monthly"
    ANNUALLY = "annually"


class TransactionType(str, Enum):
    """Side of a cash flow entry."""

    RECEITA = "Receita"
    CUSTO = "Custo"


DEFAULT_COST_CATEGORIES = (
    "Mão de obra",
    "Materiais",
    "Marketing",
    "Software",
    "Outros",
)


def _check_installment_recurring(is_installment: bool, is_recurring: bool) -> None:
    if is_installment and is_recurring:
        raise ValidationError("A cost item cannot be both an installment and recurring")


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: str
    user_id: str
    name: str
    client: str
    start_date: date
    status: ProjectStatus
    planned_total_revenue: Decimal
    planned_total_cost: Decimal
    actual_total_cost: Decimal = Decimal("0")
    actual_total_revenue: Decimal = Decimal("0")
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CostItem:
    """Payable domain entity. ``project_id`` is None for company costs."""

    id: str
    user_id: str
    name: str
    category: str
    status: CostItemStatus
    planned_amount: Decimal
    actual_amount: Decimal
    transaction_date: date
    project_id: Optional[str] = None
    supplier: Optional[str] = None
    description: Optional[str] = None
    is_installment: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    installment_group_id: Optional[str] = None
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    fixed_cost_id: Optional[str] = None
    deviation_analysis_note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        _check_installment_recurring(self.is_installment, self.is_recurring)


@dataclass(frozen=True)
class RevenueItem:
    """Receivable domain entity, always owned by a project."""

    id: str
    user_id: str
    project_id: str
    name: str
    planned_amount: Decimal
    received_amount: Decimal
    transaction_date: date
    payment_method: Optional[str] = None
    description: Optional[str] = None
    is_installment: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    installment_group_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class FixedCost:
    """Recurring company cost template. Generates payables, is never paid."""

    id: str
    user_id: str
    name: str
    category: str
    amount: Decimal
    next_payment_date: date
    frequency: Frequency = Frequency.MONTHLY
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CostCategory:
    """User-scoped cost category label."""

    id: str
    user_id: str
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CostItemDraft:
    """A payable about to be written. The store assigns id and timestamps."""

    name: str
    category: str
    planned_amount: Decimal
    transaction_date: date
    actual_amount: Decimal = Decimal("0")
    status: CostItemStatus = CostItemStatus.PENDENTE
    project_id: Optional[str] = None
    supplier: Optional[str] = None
    description: Optional[str] = None
    is_installment: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    installment_group_id: Optional[str] = None
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    fixed_cost_id: Optional[str] = None

    def __post_init__(self):
        _check_installment_recurring(self.is_installment, self.is_recurring)


@dataclass(frozen=True)
class RevenueItemDraft:
    """A receivable about to be written under a project."""

    name: str
    planned_amount: Decimal
    transaction_date: date
    received_amount: Decimal = Decimal("0")
    payment_method: Optional[str] = None
    description: Optional[str] = None
    is_installment: bool = False
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    installment_group_id: Optional[str] = None


@dataclass(frozen=True)
class InstallmentLine:
    """One line of an installment schedule."""

    number: int
    total: int
    name: str
    amount: Decimal
    due_date: date


@dataclass(frozen=True)
class CategoryDeviation:
    """Predicted vs actual cost for one category."""

    category: str
    predicted: Decimal
    actual: Decimal


@dataclass(frozen=True)
class DeviationResult:
    """Outcome of a cost deviation evaluation."""

    predicted_cost: Decimal
    actual_cost: Decimal
    threshold_percentage: Decimal
    deviation_amount: Decimal
    deviation_percentage: Decimal
    is_significant: bool
    explanation: Optional[str] = None


@dataclass(frozen=True)
class ItemDeviation:
    """Deviation badge for a single payable."""

    is_over: bool
    percentage: Decimal


@dataclass(frozen=True)
class ProjectMetrics:
    """Realised totals for a project or the whole portfolio."""

    actual_total_revenue: Decimal
    actual_total_cost: Decimal
    actual_profit: Decimal
    margin_percentage: Decimal


@dataclass(frozen=True)
class ProjectSummary:
    """Row of the projects table, derived from denormalised totals."""

    project: Project
    predicted_profit: Decimal
    actual_profit: Decimal
    progress: Decimal


@dataclass(frozen=True)
class PortfolioProgress:
    """Average revenue progress and project counts by status."""

    progress: Decimal
    completed: int
    in_progress: int
    pending: int


@dataclass(frozen=True)
class MonthlyPoint:
    """Actual and planned totals for one calendar month."""

    month: date
    actual: Decimal
    planned: Decimal

    @property
    def label(self) -> str:
        return self.month.strftime("%Y-%m")


@dataclass(frozen=True)
class CategoryTotal:
    """Best known cost value for one category."""

    category: str
    value: Decimal


@dataclass(frozen=True)
class MonthlyOverview:
    """Key metrics for one calendar month."""

    month: date
    revenue: Decimal
    cost: Decimal
    result: Decimal
    projects_in_progress: int


@dataclass(frozen=True)
class WeeklySummary:
    """Pending payables and receivables due in the current week."""

    week_start: date
    week_end: date
    payments: tuple[CostItem, ...] = field(default_factory=tuple)
    receivables: tuple[RevenueItem, ...] = field(default_factory=tuple)
    total_to_pay: Decimal = Decimal("0")
    total_to_receive: Decimal = Decimal("0")


@dataclass(frozen=True)
class CashFlowEntry:
    """One line of the merged cash flow ledger."""

    id: str
    type: TransactionType
    description: str
    amount: Decimal
    date: date
    category: str
    project: str
    status: PaymentStatus
