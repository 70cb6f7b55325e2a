"""Public storefront helpers: catalog search, promo banners, WhatsApp links."""
from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import quote

from backend.app.core.errors import ValidationFailed
from backend.app.schemas.records import StockItemRecord
from backend.app.services.file_service import PROMO_BUCKET, AssetStore

_PROMO_RE = re.compile(r"^promo_(\d+)\.webp$")

SHOP_NAME = "KIKSTshop"

# Punctuation left unescaped so WhatsApp formatting marks stay readable
_URI_SAFE = "!*'()"


def search_catalog(items: Iterable[StockItemRecord], query: str | None = None) -> list[StockItemRecord]:
    """Case-insensitive name filter; a blank query returns everything."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.lower()]


def promo_slides(assets: AssetStore) -> list[dict[str, object]]:
    """Banner images ``promo_<n>.webp`` ordered by ``n``; other files are ignored."""
    slides: list[tuple[int, str]] = []
    for name in assets.list(PROMO_BUCKET):
        match = _PROMO_RE.match(name)
        if match:
            slides.append((int(match.group(1)), name))
    slides.sort()
    return [
        {"position": position, "name": name, "url": assets.public_url(PROMO_BUCKET, name)}
        for position, name in slides
    ]


def default_contact_message(item_name: str | None = None) -> str:
    if item_name:
        return f"Halo, mau tanya item *_{item_name}_*. Apa masih tersedia?"
    return f"Halo, saya mau tanya item di {SHOP_NAME}."


def contact_link(number: str, customer_name: str, message: str) -> str:
    """``https://wa.me/<number>?text=...`` introducing the customer by name."""
    name = (customer_name or "").strip()
    body = (message or "").strip()
    if not name or not body:
        raise ValidationFailed("contact_fields_required")
    text = f"Halo, saya *_{name}_*\n\n{body}"
    digits = re.sub(r"\D", "", number)
    return f"https://wa.me/{digits}?text={quote(text, safe=_URI_SAFE)}"
