"""Sale recording: the atomic stock-decrementing sale and capital injections."""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from backend.app.core.errors import NotFound, SaleRejected, ValidationFailed
from backend.app.models.sales import CAPITAL_SALE_NAME, Sale, SaleStatus
from backend.app.models.stock import StockItem
from backend.app.schemas.records import SaleRecord
from backend.app.services.periods import to_utc
from backend.app.services.record_store import RecordStore
from backend.app.services.stock import get_or_create_system_item

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Messages of the sale operation, surfaced to the operator verbatim
QTY_NOT_POSITIVE = "qty harus lebih dari 0"
ITEM_NOT_FOUND = "item tidak ditemukan"
INSUFFICIENT_STOCK = "stok tidak cukup"


def _clean_buyer(buyer_name: str | None) -> str | None:
    name = (buyer_name or "").strip()
    return name or None


def create_sale(
    store: RecordStore,
    *,
    stock_item_id: int,
    qty: int,
    buyer_name: str | None = None,
    sold_at: datetime | None = None,
    status: SaleStatus | str | None = SaleStatus.PAID,
) -> SaleRecord:
    """Sell *qty* units of a stock item as one unit of work.

    The item row is locked for the whole check-and-decrement, and the sale
    captures the item's name and price at that moment. Any failure rolls the
    transaction back completely and raises :class:`SaleRejected`.
    """
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise SaleRejected(QTY_NOT_POSITIVE)
    try:
        sale_status = SaleStatus.parse(status)
    except ValueError as exc:
        raise SaleRejected(str(exc)) from exc

    with store.session() as db:
        item = (
            db.query(StockItem)
            .filter(StockItem.id == stock_item_id)
            .with_for_update()
            .first()
        )
        if item is None:
            raise SaleRejected(ITEM_NOT_FOUND)
        if item.stock < qty:
            raise SaleRejected(INSUFFICIENT_STOCK)

        item.stock -= qty
        sale = Sale(
            sold_at=to_utc(sold_at),
            stock_item_id=item.id,
            item_name=item.name,
            unit_price=item.price,
            qty=qty,
            total_price=item.price * qty,
            buyer_name=_clean_buyer(buyer_name),
            status=sale_status,
        )
        db.add(sale)
        db.flush()
        record = SaleRecord.model_validate(sale)

    logger.info("Sale %s: %d x %s", record.id, qty, record.item_name)
    return record


def record_capital_injection(
    store: RecordStore, *, amount: Decimal, at: datetime | None = None
) -> SaleRecord:
    """Book owner-contributed funds as a paid sale of the hidden anchor item."""
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= ZERO:
        raise ValidationFailed("capital_must_be_positive")

    with store.session() as db:
        anchor = get_or_create_system_item(db)
        sale = Sale(
            sold_at=to_utc(at),
            stock_item_id=anchor.id,
            item_name=CAPITAL_SALE_NAME,
            unit_price=amount,
            qty=1,
            total_price=amount,
            status=SaleStatus.PAID,
        )
        db.add(sale)
        db.flush()
        record = SaleRecord.model_validate(sale)

    logger.info("Capital injection %s recorded", record.id)
    return record


def update_sale(
    store: RecordStore,
    sale_id: int,
    *,
    qty: int | None = None,
    buyer_name: str | None = None,
    status: SaleStatus | str | None = None,
) -> SaleRecord:
    """Edit a sale. A quantity change recomputes the total at the stored unit price.

    ``buyer_name=None`` leaves the buyer untouched; an empty string clears it.
    """
    if qty is not None and (isinstance(qty, bool) or qty <= 0):
        raise ValidationFailed("qty_must_be_positive")

    with store.session() as db:
        sale = db.get(Sale, sale_id)
        if sale is None:
            raise NotFound("sale_not_found")
        if qty is not None:
            sale.qty = qty
            sale.total_price = sale.unit_price * qty
        if buyer_name is not None:
            sale.buyer_name = _clean_buyer(buyer_name)
        if status is not None:
            sale.status = SaleStatus.parse(status)
        db.flush()
        return SaleRecord.model_validate(sale)


def delete_sale(store: RecordStore, sale_id: int) -> None:
    with store.session() as db:
        sale = db.get(Sale, sale_id)
        if sale is None:
            raise NotFound("sale_not_found")
        db.delete(sale)
    logger.info("Sale %s deleted", sale_id)
