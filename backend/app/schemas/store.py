from __future__ import annotations

from pydantic import BaseModel


class PromoSlideOut(BaseModel):
    position: int
    name: str
    url: str


class ContactRequest(BaseModel):
    name: str
    message: str | None = None
    item_name: str | None = None


class ContactLinkOut(BaseModel):
    url: str
    message: str
