from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator

from backend.app.models.sales import SaleStatus


class SaleCreate(BaseModel):
    stock_item_id: int
    qty: int
    buyer_name: str | None = None
    sold_at: datetime | None = None
    status: SaleStatus = SaleStatus.PAID

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: object) -> SaleStatus:
        return SaleStatus.parse(v)  # type: ignore[arg-type]


class CapitalCreate(BaseModel):
    amount: Decimal
    at: datetime | None = None


class SaleUpdate(BaseModel):
    qty: int | None = None
    buyer_name: str | None = None
    status: SaleStatus | None = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: object) -> SaleStatus | None:
        if v is None:
            return None
        return SaleStatus.parse(v)  # type: ignore[arg-type]
