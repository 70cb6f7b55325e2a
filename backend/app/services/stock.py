"""Stock catalog mutations."""
from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.models.sales import Sale
from backend.app.models.stock import SYSTEM_ITEM_NAME, StockItem
from backend.app.schemas.records import StockItemRecord
from backend.app.services.file_service import ITEM_BUCKET, generate_file_name, name_from_url
from backend.app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _check_price(price: Decimal) -> Decimal:
    if not isinstance(price, Decimal) or not price.is_finite() or price < ZERO:
        raise ValidationFailed("invalid_price")
    return price


def _check_stock(stock: int, key: str = "invalid_stock") -> int:
    if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
        raise ValidationFailed(key)
    return stock


def _get_item(db: Session, item_id: int) -> StockItem:
    item = db.get(StockItem, item_id)
    if item is None or item.name == SYSTEM_ITEM_NAME:
        raise NotFound("item_not_found")
    return item


def create_stock_item(
    store: RecordStore,
    *,
    name: str,
    price: Decimal,
    stock: int,
    image: bytes | None = None,
) -> StockItemRecord:
    """Add a catalog entry, uploading its picture first when one is given."""
    clean_name = (name or "").strip()
    if not clean_name:
        raise ValidationFailed("item_name_required")
    _check_price(price)
    _check_stock(stock)

    image_url = None
    file_name = None
    if image:
        file_name = generate_file_name("item")
        try:
            image_url = store.assets.upload(ITEM_BUCKET, file_name, image)
        except OSError as exc:
            logger.warning("Image upload failed for %s: %s", clean_name, exc)
            raise ValidationFailed("upload_failed", reason=str(exc)) from exc

    try:
        with store.session() as db:
            item = StockItem(name=clean_name, price=price, stock=stock, image_url=image_url)
            db.add(item)
            db.flush()
            db.refresh(item)
            record = StockItemRecord.model_validate(item)
    except Exception:
        if file_name:
            store.assets.remove(ITEM_BUCKET, [file_name])
        raise

    logger.info("Stock item %s created (%s)", record.id, clean_name)
    return record


def update_price(store: RecordStore, item_id: int, price: Decimal) -> StockItemRecord:
    _check_price(price)
    with store.session() as db:
        item = _get_item(db, item_id)
        item.price = price
        db.flush()
        return StockItemRecord.model_validate(item)


def set_stock(store: RecordStore, item_id: int, stock: int) -> StockItemRecord:
    """Overwrite the on-hand quantity (absolute, not a delta)."""
    _check_stock(stock, "invalid_stock_amount")
    with store.session() as db:
        item = _get_item(db, item_id)
        item.stock = stock
        db.flush()
        return StockItemRecord.model_validate(item)


def delete_stock_items(store: RecordStore, ids: list[int]) -> int:
    """Delete catalog entries and their pictures; returns the number deleted.

    Picture removal failures are logged and do not stop the row deletion.
    Past sales keep their name/price snapshot with the item reference cleared.
    """
    if not ids:
        return 0

    with store.session(touches=("stock_items", "sales")) as db:
        rows = db.execute(
            select(StockItem.id, StockItem.image_url).where(
                StockItem.id.in_(ids), StockItem.name != SYSTEM_ITEM_NAME
            )
        ).all()
        found = [row.id for row in rows]
        if not found:
            return 0

        names = [n for n in (name_from_url(row.image_url) for row in rows) if n]
        if names:
            try:
                store.assets.remove(ITEM_BUCKET, names)
            except OSError as exc:
                logger.warning("Could not delete item images %s: %s", names, exc)

        db.execute(
            update(Sale).where(Sale.stock_item_id.in_(found)).values(stock_item_id=None)
        )
        db.query(StockItem).filter(StockItem.id.in_(found)).delete(synchronize_session=False)

    logger.info("Deleted %d stock item(s)", len(found))
    return len(found)


def get_or_create_system_item(db: Session) -> StockItem:
    """The hidden anchor item for capital injections, created on first use."""
    item = db.query(StockItem).filter(StockItem.name == SYSTEM_ITEM_NAME).first()
    if item is None:
        item = StockItem(name=SYSTEM_ITEM_NAME, price=ZERO, stock=0)
        db.add(item)
        db.flush()
    return item
