"""Snapshot loader: one consistent, decoded view of the Record Store."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from backend.app.core.errors import LoadError
from backend.app.models.stock import SYSTEM_ITEM_NAME
from backend.app.schemas.records import ExpenseRecord, SaleRecord, StockItemRecord

if TYPE_CHECKING:
    from backend.app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    stock_items: list[StockItemRecord] = field(default_factory=list)
    sales: list[SaleRecord] = field(default_factory=list)
    expenses: list[ExpenseRecord] = field(default_factory=list)
    configured: bool = True


def empty_snapshot() -> Snapshot:
    """Snapshot served while no Record Store is configured."""
    return Snapshot(configured=False)


def decode_snapshot(
    stock_rows: list[dict[str, Any]],
    sale_rows: list[dict[str, Any]],
    expense_rows: list[dict[str, Any]],
) -> Snapshot:
    """Decode raw rows; the capital anchor item never reaches the catalog."""
    items = [StockItemRecord.model_validate(row) for row in stock_rows]
    return Snapshot(
        stock_items=[item for item in items if item.name != SYSTEM_ITEM_NAME],
        sales=[SaleRecord.model_validate(row) for row in sale_rows],
        expenses=[ExpenseRecord.model_validate(row) for row in expense_rows],
    )


async def load_snapshot(store: RecordStore) -> Snapshot:
    """Fetch stock items, sales and expenses concurrently and decode them.

    Any failed fetch fails the whole load with a :class:`LoadError` carrying
    the first failure's message (stock, then sales, then expenses); partial
    results are discarded.
    """
    results = await asyncio.gather(
        asyncio.to_thread(store.fetch_stock_items),
        asyncio.to_thread(store.fetch_sales),
        asyncio.to_thread(store.fetch_expenses),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            logger.error("Snapshot load failed: %s", result)
            raise LoadError(str(result)) from result

    stock_rows, sale_rows, expense_rows = results
    return decode_snapshot(stock_rows, sale_rows, expense_rows)  # type: ignore[arg-type]
