from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class StockItemCreate(BaseModel):
    name: str
    price: Decimal = Decimal("0")
    stock: int = 0
    # Already cropped/compressed picture, base64 encoded (data: URLs accepted)
    image_base64: str | None = None


class PriceUpdate(BaseModel):
    price: Decimal


class StockUpdate(BaseModel):
    stock: int


class StockDeleteRequest(BaseModel):
    ids: list[int] = Field(default_factory=list)


class StockDeleteResult(BaseModel):
    deleted: int
