from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.core.database import Base

# Item name written on capital-injection rows; reports count these as capital.
CAPITAL_SALE_NAME = "Modal / Dana Awal"


class SaleStatus(str, enum.Enum):
    PAID = "lunas"
    UNPAID = "belum_bayar"

    @classmethod
    def parse(cls, value: str | SaleStatus | None) -> SaleStatus:
        """Accept stored values as well as the English ``paid``/``unpaid`` aliases."""
        if isinstance(value, SaleStatus):
            return value
        if value is None:
            return cls.PAID
        normalized = str(value).strip().lower()
        aliases = {"paid": cls.PAID, "unpaid": cls.UNPAID}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class Sale(Base):
    """One sale line with the item's name and price captured at sale time."""

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    sold_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    stock_item_id: Mapped[int | None] = mapped_column(
        ForeignKey("stock_items.id", ondelete="SET NULL"), nullable=True
    )
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False
    )
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False
    )
    buyer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[SaleStatus] = mapped_column(
        Enum(
            SaleStatus,
            name="sale_status",
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=SaleStatus.PAID,
        server_default=SaleStatus.PAID.value,
    )

    __table_args__ = (
        CheckConstraint("qty > 0", name="ck_sale_qty_positive"),
        Index("ix_sales_sold_at", "sold_at"),
        Index("ix_sales_stock_item", "stock_item_id"),
    )
