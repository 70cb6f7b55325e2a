from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.models.expense import Expense
from backend.app.schemas.records import ExpenseRecord
from backend.app.services.periods import to_utc
from backend.app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _check_money(value: Decimal, key: str = "invalid_cost") -> Decimal:
    if not isinstance(value, Decimal) or not value.is_finite() or value < ZERO:
        raise ValidationFailed(key)
    return value


def compose_description(item: str, qty: int, note: str | None = None) -> str:
    """``"Lakban (Qty: 3)"``, with ``" - <note>"`` appended when a note is given."""
    description = f"{item} (Qty: {qty})"
    note = (note or "").strip()
    if note:
        description += f" - {note}"
    return description


def record_expense(
    store: RecordStore,
    *,
    item: str,
    unit_price: Decimal,
    qty: int,
    other_cost: Decimal = ZERO,
    note: str | None = None,
    bought_at: datetime | None = None,
) -> ExpenseRecord:
    """Record a purchase or operating cost.

    Only the composed description and the final total are stored:
    total_cost = unit_price × qty + other_cost.
    """
    clean_item = (item or "").strip()
    if not clean_item:
        raise ValidationFailed("expense_item_required")
    _check_money(unit_price, "invalid_price")
    _check_money(other_cost)
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationFailed("qty_must_be_positive")

    with store.session() as db:
        expense = Expense(
            bought_at=to_utc(bought_at),
            description=compose_description(clean_item, qty, note),
            total_cost=unit_price * qty + other_cost,
        )
        db.add(expense)
        db.flush()
        record = ExpenseRecord.model_validate(expense)

    logger.info("Expense %s recorded: %s", record.id, record.total_cost)
    return record


def update_expense(
    store: RecordStore,
    expense_id: int,
    *,
    description: str | None = None,
    total_cost: Decimal | None = None,
    bought_at: datetime | None = None,
) -> ExpenseRecord:
    if total_cost is not None:
        _check_money(total_cost)

    with store.session() as db:
        expense = db.get(Expense, expense_id)
        if expense is None:
            raise NotFound("expense_not_found")
        if description is not None:
            expense.description = description.strip() or None
        if total_cost is not None:
            expense.total_cost = total_cost
        if bought_at is not None:
            expense.bought_at = to_utc(bought_at)
        db.flush()
        return ExpenseRecord.model_validate(expense)


def delete_expense(store: RecordStore, expense_id: int) -> None:
    with store.session() as db:
        expense = db.get(Expense, expense_id)
        if expense is None:
            raise NotFound("expense_not_found")
        db.delete(expense)
    logger.info("Expense %s deleted", expense_id)
