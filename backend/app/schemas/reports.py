"""Response models for dashboard and report endpoints."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from backend.app.models.sales import SaleStatus
from backend.app.schemas.records import StockItemRecord


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MetricsOut(_Out):
    total_sales: int
    total_revenue: Decimal
    total_expenses: Decimal
    profit: Decimal
    piutang: Decimal


class DailyPointOut(_Out):
    day: date
    label: str
    amount: Decimal


class TransactionOut(_Out):
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


class LedgerSummaryOut(_Out):
    from_date: date
    to_date: date
    printed_at: datetime
    transaction_count: int
    total_revenue: Decimal
    total_capital: Decimal
    total_expenses: Decimal
    net_income: Decimal


class DashboardOut(BaseModel):
    configured: bool
    warning: str | None = None
    window: str
    metrics: MetricsOut
    series: list[DailyPointOut]
    low_stock: list[StockItemRecord]
    recent_transactions: list[TransactionOut]


class SeriesOut(BaseModel):
    configured: bool
    days: int
    series: list[DailyPointOut]


class TransactionReportOut(BaseModel):
    configured: bool
    warning: str | None = None
    from_date: date
    to_date: date
    status: str
    search: str | None = None
    metrics: MetricsOut
    summary: LedgerSummaryOut
    transactions: list[TransactionOut]


class ExportJobOut(BaseModel):
    task_id: str
    filename: str
