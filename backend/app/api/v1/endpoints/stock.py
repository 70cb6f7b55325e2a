from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, status

from backend.app.api.deps import get_language, get_snapshot, require_store, service_errors
from backend.app.core.errors import ValidationFailed
from backend.app.schemas.records import StockItemRecord
from backend.app.schemas.stock import (
    PriceUpdate,
    StockDeleteRequest,
    StockDeleteResult,
    StockItemCreate,
    StockUpdate,
)
from backend.app.services.record_store import RecordStore
from backend.app.services.snapshot import Snapshot
from backend.app.services.stock import (
    create_stock_item,
    delete_stock_items,
    set_stock,
    update_price,
)

router = APIRouter()


def _decode_image(data: str | None) -> bytes | None:
    if not data:
        return None
    if data.startswith("data:"):
        data = data.split(",", 1)[-1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailed("invalid_image") from exc


@router.get("", response_model=list[StockItemRecord])
def list_stock(snapshot: Snapshot = Depends(get_snapshot)) -> list[StockItemRecord]:
    return snapshot.stock_items


@router.post("", response_model=StockItemRecord, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: StockItemCreate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> StockItemRecord:
    with service_errors(lang):
        return create_stock_item(
            store,
            name=payload.name,
            price=payload.price,
            stock=payload.stock,
            image=_decode_image(payload.image_base64),
        )


@router.patch("/{item_id}/price", response_model=StockItemRecord)
def change_price(
    item_id: int,
    payload: PriceUpdate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> StockItemRecord:
    with service_errors(lang):
        return update_price(store, item_id, payload.price)


@router.put("/{item_id}/stock", response_model=StockItemRecord)
def change_stock(
    item_id: int,
    payload: StockUpdate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> StockItemRecord:
    with service_errors(lang):
        return set_stock(store, item_id, payload.stock)


@router.post("/delete", response_model=StockDeleteResult)
def delete_items(
    payload: StockDeleteRequest,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> StockDeleteResult:
    with service_errors(lang):
        deleted = delete_stock_items(store, payload.ids)
    return StockDeleteResult(deleted=deleted)
