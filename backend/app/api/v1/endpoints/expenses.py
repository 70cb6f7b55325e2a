from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from backend.app.api.deps import get_language, get_snapshot, require_store, service_errors
from backend.app.schemas.expenses import ExpenseCreate, ExpenseUpdate
from backend.app.schemas.records import ExpenseRecord
from backend.app.services.expenses import delete_expense, record_expense, update_expense
from backend.app.services.record_store import RecordStore
from backend.app.services.snapshot import Snapshot

router = APIRouter()


@router.get("", response_model=list[ExpenseRecord])
def get_expenses(snapshot: Snapshot = Depends(get_snapshot)) -> list[ExpenseRecord]:
    return snapshot.expenses


@router.post("", response_model=ExpenseRecord, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> ExpenseRecord:
    with service_errors(lang):
        return record_expense(
            store,
            item=payload.item,
            unit_price=payload.unit_price,
            qty=payload.qty,
            other_cost=payload.other_cost,
            note=payload.note,
            bought_at=payload.bought_at,
        )


@router.put("/{expense_id}", response_model=ExpenseRecord)
def edit_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> ExpenseRecord:
    with service_errors(lang):
        return update_expense(
            store,
            expense_id,
            description=payload.description,
            total_cost=payload.total_cost,
            bought_at=payload.bought_at,
        )


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_expense(
    expense_id: int,
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> Response:
    with service_errors(lang):
        delete_expense(store, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
