"""Service layer for the sales ledger report.

Pure transforms over an already range-filtered sale/expense set: no
additional filtering happens here or in the exporters.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from backend.app.models.sales import SaleStatus
from backend.app.schemas.records import ExpenseRecord, SaleRecord
from backend.app.services.export_i18n import t
from backend.app.services.periods import local_now

ZERO = Decimal("0")

INCOME = "income"
LEDGER = "ledger"
REPORT_KINDS = (INCOME, LEDGER)
EXPORT_FORMATS = {"excel": "xlsx", "pdf": "pdf"}

_FILE_PREFIX = {INCOME: "income", LEDGER: "laporan"}
_STAMP_FMT = "%d/%m/%Y %H:%M"


@dataclass(frozen=True)
class LedgerSummary:
    from_date: date
    to_date: date
    printed_at: datetime
    transaction_count: int
    total_revenue: Decimal
    total_capital: Decimal
    total_expenses: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class SaleRow:
    date: str
    item_name: str
    qty: int
    unit_price: Decimal
    total_price: Decimal
    buyer: str
    status: str


# ── Helpers ──────────────────────────────────────────────────────────────────


def format_rupiah(value: Decimal | int | float) -> str:
    """``Rp 1.250.000`` style, rounded to whole rupiah."""
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{sign}Rp {digits}"


def format_stamp(moment: datetime, tz: tzinfo | None = None) -> str:
    return local_now(moment, tz).strftime(_STAMP_FMT)


def status_label(status: SaleStatus, lang: str = "id") -> str:
    return t(lang, "status_paid" if status == SaleStatus.PAID else "status_unpaid")


# ── Builders ─────────────────────────────────────────────────────────────────


def build_ledger_summary(
    sales: Iterable[SaleRecord],
    expenses: Iterable[ExpenseRecord],
    from_date: date,
    to_date: date,
    printed_at: datetime | None = None,
) -> LedgerSummary:
    """Header figures of the extended ledger.

    Capital injections are kept apart from revenue and reported as a memo
    line; net income is revenue minus expenses only.
    """
    count = 0
    revenue = ZERO
    capital = ZERO
    for sale in sales:
        if sale.is_capital:
            capital += sale.total_price
        else:
            count += 1
            revenue += sale.total_price
    spent = sum((e.total_cost for e in expenses), ZERO)
    return LedgerSummary(
        from_date=from_date,
        to_date=to_date,
        printed_at=local_now(printed_at),
        transaction_count=count,
        total_revenue=revenue,
        total_capital=capital,
        total_expenses=spent,
        net_income=revenue - spent,
    )


def build_sale_rows(
    sales: Iterable[SaleRecord], lang: str = "id", tz: tzinfo | None = None
) -> list[SaleRow]:
    """One export row per sale, capital rows included, input order kept."""
    return [
        SaleRow(
            date=format_stamp(sale.sold_at, tz),
            item_name=sale.item_name,
            qty=sale.qty,
            unit_price=sale.unit_price,
            total_price=sale.total_price,
            buyer=sale.buyer_name or "-",
            status=status_label(sale.status, lang),
        )
        for sale in sales
    ]


def export_filename(kind: str, fmt: str, from_date: date, to_date: date) -> str:
    """``income-2024-01-01-to-2024-01-31.xlsx`` / ``laporan-….pdf``."""
    if kind not in _FILE_PREFIX:
        raise ValueError(f"Unknown report kind: {kind}")
    ext = EXPORT_FORMATS.get(fmt, fmt)
    if ext not in EXPORT_FORMATS.values():
        raise ValueError(f"Unknown export format: {fmt}")
    return f"{_FILE_PREFIX[kind]}-{from_date.isoformat()}-to-{to_date.isoformat()}.{ext}"
