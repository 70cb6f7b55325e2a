"""Public storefront: catalog, promo banners and the WhatsApp contact link."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from backend.app.api.deps import get_language, get_snapshot, get_store, service_errors
from backend.app.core.config import settings
from backend.app.schemas.records import StockItemRecord
from backend.app.schemas.store import ContactLinkOut, ContactRequest, PromoSlideOut
from backend.app.services.record_store import RecordStore
from backend.app.services.snapshot import Snapshot
from backend.app.services.storefront import (
    contact_link,
    default_contact_message,
    promo_slides,
    search_catalog,
)

router = APIRouter()


@router.get("/items", response_model=list[StockItemRecord])
def store_items(
    search: str | None = Query(None),
    snapshot: Snapshot = Depends(get_snapshot),
) -> list[StockItemRecord]:
    return search_catalog(snapshot.stock_items, search)


@router.get("/promos", response_model=list[PromoSlideOut])
def store_promos(store: RecordStore | None = Depends(get_store)) -> list[dict[str, object]]:
    if store is None:
        return []
    return promo_slides(store.assets)


@router.post("/contact", response_model=ContactLinkOut)
def store_contact(
    payload: ContactRequest,
    lang: str = Depends(get_language),
) -> ContactLinkOut:
    message = payload.message or default_contact_message(payload.item_name)
    with service_errors(lang):
        url = contact_link(settings.WHATSAPP_NUMBER, payload.name, message)
    return ContactLinkOut(url=url, message=message)
