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
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.core.database import Base


class Expense(Base):
    """Operating cost unrelated to the stock catalog.

    Only the composed description and final total are stored; the unit price,
    quantity and other costs entered on the form are folded into them.
    """

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    bought_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False
    )

    __table_args__ = (
        CheckConstraint("total_cost >= 0", name="ck_expense_total_cost_non_negative"),
        Index("ix_expenses_bought_at", "bought_at"),
    )
