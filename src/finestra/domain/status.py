"""Payment and receivable status derivation.

Status labels are recomputed from the record and the reference date on
every read and never stored. A payable counts as paid when either its
persisted status says so or an actual amount was recorded.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence, TypeVar, Union

from finestra.domain.entities import (
    CostItem,
    CostItemStatus,
    ItemDeviation,
    PaymentStatus,
    RevenueItem,
)

Item = TypeVar("Item", CostItem, RevenueItem)

ITEM_DEVIATION_THRESHOLD = Decimal("0.1")

_STATUS_RANK = {
    PaymentStatus.ATRASADO: 0,
    PaymentStatus.PENDENTE: 1,
    PaymentStatus.PAGO: 2,
    PaymentStatus.RECEBIDO: 2,
}


def _open_status(transaction_date: date, today: date) -> PaymentStatus:
    if transaction_date < today:
        return PaymentStatus.ATRASADO
    return PaymentStatus.PENDENTE


def cost_status(item: CostItem, today: date) -> PaymentStatus:
    """Derive Pago, Atrasado or Pendente for a payable."""
    if item.status == CostItemStatus.PAGO or item.actual_amount > 0:
        return PaymentStatus.PAGO
    return _open_status(item.transaction_date, today)


def revenue_status(item: RevenueItem, today: date) -> PaymentStatus:
    """Derive Recebido, Atrasado or Pendente for a receivable."""
    if item.received_amount > 0:
        return PaymentStatus.RECEBIDO
    return _open_status(item.transaction_date, today)


def item_status(item: Union[CostItem, RevenueItem], today: date) -> PaymentStatus:
    """Derive the status of either kind of item."""
    if isinstance(item, CostItem):
        return cost_status(item, today)
    return revenue_status(item, today)


def status_sort_key(item: Union[CostItem, RevenueItem], today: date) -> tuple[int, int]:
    """Sort key: overdue first, then pending, then settled.

    Open items come oldest first, settled items most recent first.
    """
    status = item_status(item, today)
    ordinal = item.transaction_date.toordinal()
    if status in (PaymentStatus.PAGO, PaymentStatus.RECEBIDO):
        ordinal = -ordinal
    return (_STATUS_RANK[status], ordinal)


def sort_by_status(items: Iterable[Item], today: date) -> list[Item]:
    """Order items for the payables/receivables lists."""
    return sorted(items, key=lambda item: status_sort_key(item, today))


def week_bounds(today: date) -> tuple[date, date]:
    """Monday and Sunday of the ISO week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def is_this_week(item: Union[CostItem, RevenueItem], today: date) -> bool:
    """Whether the item falls due in the current week, whatever its status."""
    monday, sunday = week_bounds(today)
    return monday <= item.transaction_date <= sunday


def this_week(items: Iterable[Item], today: date) -> list[Item]:
    """Items due in the current week."""
    return [item for item in items if is_this_week(item, today)]


def overdue(items: Iterable[Item], today: date) -> list[Item]:
    """Items whose derived status is Atrasado, whatever the week."""
    return [
        item for item in items if item_status(item, today) == PaymentStatus.ATRASADO
    ]


def cost_deviation(item: CostItem) -> Optional[ItemDeviation]:
    """Deviation badge shown next to a payable.

    Only computed once both amounts are known, and only reported when the
    actual amount is more than 10% away from the planned one.
    """
    if item.actual_amount == 0 or item.planned_amount == 0:
        return None
    deviation = (item.actual_amount - item.planned_amount) / item.planned_amount
    if abs(deviation) <= ITEM_DEVIATION_THRESHOLD:
        return None
    return ItemDeviation(is_over=deviation > 0, percentage=abs(deviation) * 100)


def partition_by_status(
    items: Sequence[Item], today: date
) -> dict[PaymentStatus, list[Item]]:
    """Group items by derived status, each group in list order."""
    groups: dict[PaymentStatus, list[Item]] = {}
    for item in sort_by_status(items, today):
        groups.setdefault(item_status(item, today), []).append(item)
    return groups
