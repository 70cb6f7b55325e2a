from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ExpenseCreate(BaseModel):
    item: str
    unit_price: Decimal
    qty: int = 1
    other_cost: Decimal = Decimal("0")
    note: str | None = None
    bought_at: datetime | None = None


class ExpenseUpdate(BaseModel):
    description: str | None = None
    total_cost: Decimal | None = None
    bought_at: datetime | None = None
