from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from backend.app.api.deps import get_language, get_snapshot, require_store, service_errors
from backend.app.schemas.records import SaleRecord
from backend.app.schemas.sales import CapitalCreate, SaleCreate, SaleUpdate
from backend.app.services.record_store import RecordStore
from backend.app.services.sales import (
    create_sale,
    delete_sale,
    record_capital_injection,
    update_sale,
)
from backend.app.services.snapshot import Snapshot

router = APIRouter()


@router.get("", response_model=list[SaleRecord])
def list_sales(snapshot: Snapshot = Depends(get_snapshot)) -> list[SaleRecord]:
    return snapshot.sales


@router.post("", response_model=SaleRecord, status_code=status.HTTP_201_CREATED)
def submit_sale(
    payload: SaleCreate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> SaleRecord:
    with service_errors(lang):
        return create_sale(
            store,
            stock_item_id=payload.stock_item_id,
            qty=payload.qty,
            buyer_name=payload.buyer_name,
            sold_at=payload.sold_at,
            status=payload.status,
        )


@router.post("/capital", response_model=SaleRecord, status_code=status.HTTP_201_CREATED)
def submit_capital(
    payload: CapitalCreate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> SaleRecord:
    with service_errors(lang):
        return record_capital_injection(store, amount=payload.amount, at=payload.at)


@router.patch("/{sale_id}", response_model=SaleRecord)
def edit_sale(
    sale_id: int,
    payload: SaleUpdate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> SaleRecord:
    with service_errors(lang):
        return update_sale(
            store,
            sale_id,
            qty=payload.qty,
            buyer_name=payload.buyer_name,
            status=payload.status,
        )


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_sale(
    sale_id: int,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> Response:
    with service_errors(lang):
        delete_sale(store, sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
