"""Dashboard metrics and the trailing daily sales series.

Everything here is a pure function over decoded records; callers pass the
clock (``now``/``today``) and timezone explicitly when they need
deterministic results.
"""
from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal

from backend.app.core.config import settings
from backend.app.models.sales import CAPITAL_SALE_NAME, SaleStatus
from backend.app.schemas.records import ExpenseRecord, SaleRecord, StockItemRecord
from backend.app.services.periods import day_start, local_date, local_now

ZERO = Decimal("0")

# Longest daily series the API serves (about ten years)
MAX_SERIES_DAYS = 3660


@dataclass(frozen=True)
class DashboardMetrics:
    total_sales: int = 0
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    profit: Decimal = ZERO
    piutang: Decimal = ZERO


@dataclass(frozen=True)
class DailyPoint:
    day: date
    label: str
    amount: Decimal


class DashboardWindow(str, enum.Enum):
    ALL = "all"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# ── Metrics ──────────────────────────────────────────────────────────────────


def compute_metrics(
    sales: Iterable[SaleRecord], expenses: Iterable[ExpenseRecord]
) -> DashboardMetrics:
    """Count, revenue, expenses, profit and receivables over the given records.

    Capital injections are counted like any other sale; use
    :func:`exclude_capital` first for "real" sales figures.
    """
    count = 0
    revenue = ZERO
    piutang = ZERO
    for sale in sales:
        count += 1
        revenue += sale.total_price
        if sale.status == SaleStatus.UNPAID:
            piutang += sale.total_price

    spent = sum((e.total_cost for e in expenses), ZERO)
    return DashboardMetrics(
        total_sales=count,
        total_revenue=revenue,
        total_expenses=spent,
        profit=revenue - spent,
        piutang=piutang,
    )


def exclude_capital(sales: Iterable[SaleRecord]) -> list[SaleRecord]:
    return [s for s in sales if s.item_name != CAPITAL_SALE_NAME]


def window_cutoff(
    window: DashboardWindow | str,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> datetime | None:
    """Start of the current week (Monday), month or year; ``None`` for all time."""
    window = DashboardWindow(window)
    if window is DashboardWindow.ALL:
        return None
    today = local_now(now, tz).date()
    if window is DashboardWindow.WEEKLY:
        start = today - timedelta(days=today.weekday())
    elif window is DashboardWindow.MONTHLY:
        start = today.replace(day=1)
    else:
        start = today.replace(month=1, day=1)
    return day_start(start, tz)


def restrict_to_window(
    sales: Iterable[SaleRecord],
    expenses: Iterable[ExpenseRecord],
    window: DashboardWindow | str,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> tuple[list[SaleRecord], list[ExpenseRecord]]:
    cutoff = window_cutoff(window, now=now, tz=tz)
    if cutoff is None:
        return list(sales), list(expenses)
    return (
        [s for s in sales if s.sold_at >= cutoff],
        [e for e in expenses if e.bought_at >= cutoff],
    )


def low_stock_items(
    items: Iterable[StockItemRecord], threshold: int | None = None
) -> list[StockItemRecord]:
    """Items at or below *threshold* units, emptiest first."""
    limit = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    return sorted((i for i in items if i.stock <= limit), key=lambda i: i.stock)


# ── Daily series ─────────────────────────────────────────────────────────────


def build_daily_series(
    sales: Iterable[SaleRecord],
    window_days: int,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[DailyPoint]:
    """Summed sale totals per calendar day for the trailing *window_days* days.

    Buckets are keyed by local calendar date and always all present, oldest
    first; sales outside the window are ignored.
    """
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
        raise ValueError("window_days must be a positive integer")

    end = today or local_now(tz=tz).date()
    try:
        start = end - timedelta(days=window_days - 1)
    except OverflowError as exc:
        raise ValueError("window_days must be a positive integer") from exc
    buckets: dict[date, Decimal] = {
        start + timedelta(days=offset): ZERO for offset in range(window_days)
    }
    for sale in sales:
        day = local_date(sale.sold_at, tz)
        if day in buckets:
            buckets[day] += sale.total_price

    return [
        DailyPoint(day=day, label=day.strftime("%d/%m"), amount=amount)
        for day, amount in buckets.items()
    ]
