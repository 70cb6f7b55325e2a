"""Strict record types decoded from raw Record Store rows.

Rows may arrive with numbers as strings, nulls, or garbage. Decoding never
rejects a row: numeric fields that cannot be parsed become zero, naive
timestamps are taken as UTC, and unknown sale statuses fall back to the
column default.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from backend.app.models.sales import CAPITAL_SALE_NAME, SaleStatus

ZERO = Decimal("0")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_decimal(value: Any) -> Decimal:
    """Coerce *value* to a finite Decimal, or zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def to_int(value: Any) -> int:
    """Coerce *value* to an int (truncating), or zero."""
    return int(to_decimal(value))


def to_aware(value: Any) -> datetime:
    """Parse a timestamp and attach UTC when it carries no offset."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return _EPOCH
    else:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class StockItemRecord(_Record):
    id: int
    name: str
    price: Decimal = ZERO
    stock: int = 0
    image_url: str | None = None
    created_at: datetime = _EPOCH

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock(cls, v: Any) -> int:
        return to_int(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_at(cls, v: Any) -> datetime:
        return to_aware(v)


class SaleRecord(_Record):
    id: int
    sold_at: datetime
    stock_item_id: int | None = None
    item_name: str = ""
    unit_price: Decimal = ZERO
    qty: int = 0
    total_price: Decimal = ZERO
    buyer_name: str | None = None
    status: SaleStatus = SaleStatus.PAID

    @field_validator("unit_price", "total_price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("qty", mode="before")
    @classmethod
    def _qty(cls, v: Any) -> int:
        return to_int(v)

    @field_validator("item_name", mode="before")
    @classmethod
    def _item_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("sold_at", mode="before")
    @classmethod
    def _sold_at(cls, v: Any) -> datetime:
        return to_aware(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> SaleStatus:
        try:
            return SaleStatus.parse(v)
        except ValueError:
            return SaleStatus.PAID

    @property
    def is_capital(self) -> bool:
        return self.item_name == CAPITAL_SALE_NAME


class ExpenseRecord(_Record):
    id: int
    bought_at: datetime
    description: str | None = None
    total_cost: Decimal = ZERO

    @field_validator("total_cost", mode="before")
    @classmethod
    def _total_cost(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("bought_at", mode="before")
    @classmethod
    def _bought_at(cls, v: Any) -> datetime:
        return to_aware(v)
