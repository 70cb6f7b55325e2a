from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.core.database import Base

# Hidden catalog entry that anchors capital-injection sale rows.
SYSTEM_ITEM_NAME = "SYSTEM_MODAL_DONOTDELETE"


class StockItem(Base):
    """Sellable catalog entry.

    `stock` is only ever decremented through ``services.sales.create_sale``,
    which holds a row lock for the duration of the check-and-decrement.
    """

    __tablename__ = "stock_items"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0")
    )
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_stock_item_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_stock_item_stock_non_negative"),
        Index("ix_stock_items_created_at", "created_at"),
    )
