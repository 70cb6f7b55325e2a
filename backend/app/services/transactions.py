"""Date-range filtering and the merged sales/expenses transaction feed."""
from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import TypeVar

from backend.app.models.sales import SaleStatus
from backend.app.schemas.records import ExpenseRecord, SaleRecord
from backend.app.services.periods import day_end, day_start

EXPENSE_FALLBACK_NAME = "Pengeluaran"

RecordT = TypeVar("RecordT", SaleRecord, ExpenseRecord)


class StatusFilter(str, enum.Enum):
    ALL = "all"
    PAID = "lunas"
    UNPAID = "belum_bayar"

    @classmethod
    def parse(cls, value: StatusFilter | str | None) -> StatusFilter:
        if isinstance(value, cls):
            return value
        normalized = (value or "all").strip().lower()
        aliases = {"paid": cls.PAID, "unpaid": cls.UNPAID}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


@dataclass(frozen=True)
class Transaction:
    type: str
    id: str
    record_id: int
    date: datetime
    name: str
    amount: Decimal
    qty: int | None = None
    unit_price: Decimal | None = None
    detail: str | None = None
    status: SaleStatus | None = None
    stock_item_id: int | None = None


def _timestamp(record: SaleRecord | ExpenseRecord) -> datetime:
    if isinstance(record, SaleRecord):
        return record.sold_at
    return record.bought_at


def filter_by_range(
    records: Iterable[RecordT],
    from_date: date,
    to_date: date,
    tz: tzinfo | None = None,
) -> list[RecordT]:
    """Records dated within the whole local days ``from_date`` .. ``to_date``.

    Both ends are inclusive. An inverted range yields nothing.
    """
    if from_date > to_date:
        return []
    start = day_start(from_date, tz)
    end = day_end(to_date, tz)
    return [r for r in records if start <= _timestamp(r) <= end]


def _from_sale(sale: SaleRecord) -> Transaction:
    return Transaction(
        type="sale",
        id=f"sale-{sale.id}",
        record_id=sale.id,
        date=sale.sold_at,
        name=sale.item_name,
        amount=sale.total_price,
        qty=sale.qty,
        unit_price=sale.unit_price,
        detail=sale.buyer_name,
        status=sale.status,
        stock_item_id=sale.stock_item_id,
    )


def _from_expense(expense: ExpenseRecord) -> Transaction:
    return Transaction(
        type="expense",
        id=f"expense-{expense.id}",
        record_id=expense.id,
        date=expense.bought_at,
        name=expense.description or EXPENSE_FALLBACK_NAME,
        amount=-expense.total_cost,
    )


def merge_transactions(
    sales: Iterable[SaleRecord], expenses: Iterable[ExpenseRecord]
) -> list[Transaction]:
    """Newest first. Equal timestamps keep sales ahead of expenses."""
    merged = [_from_sale(s) for s in sales] + [_from_expense(e) for e in expenses]
    # list.sort is stable, also with reverse=True
    merged.sort(key=lambda t: t.date, reverse=True)
    return merged


def filter_transactions(
    transactions: Sequence[Transaction],
    status: StatusFilter | str | None = StatusFilter.ALL,
    search: str | None = None,
) -> list[Transaction]:
    wanted = StatusFilter.parse(status)
    result = list(transactions)
    if wanted is not StatusFilter.ALL:
        result = [
            t for t in result
            if t.type == "sale" and t.status is not None and t.status.value == wanted.value
        ]
    needle = (search or "").strip().lower()
    if needle:
        result = [
            t for t in result
            if needle in t.name.lower() or needle in (t.detail or "").lower()
        ]
    return result


def recent_transactions(
    sales: Iterable[SaleRecord], expenses: Iterable[ExpenseRecord], limit: int = 5
) -> list[Transaction]:
    return merge_transactions(sales, expenses)[:limit]
