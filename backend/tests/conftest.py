"""Shared test fixtures.

Each test gets its own SQLite database file, so snapshot fetches running on
worker threads see exactly what the test wrote and nothing leaks between
tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from backend.app.api.deps import get_store
from backend.app.core.database import Base
from backend.app.main import app
from backend.app.models.expense import Expense
from backend.app.models.sales import Sale, SaleStatus
from backend.app.models.stock import StockItem
from backend.app.schemas.records import ExpenseRecord, SaleRecord, StockItemRecord
from backend.app.services.file_service import AssetStore
from backend.app.services.periods import to_utc
from backend.app.services.record_store import RecordStore


# ─── Store wired to a throwaway database ─────────────────────────────────────


@pytest.fixture()
def session_factory(tmp_path: Path) -> Generator[sessionmaker[Session], None, None]:
    engine = create_engine(
        f"sqlite:///{tmp_path / 'shop.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture()
def assets(tmp_path: Path) -> AssetStore:
    return AssetStore(root=str(tmp_path / "files"), base_url="/files")


@pytest.fixture()
def store(session_factory: sessionmaker[Session], assets: AssetStore) -> Generator[RecordStore, None, None]:
    record_store = RecordStore(session_factory, assets)
    yield record_store
    record_store.close()


@pytest.fixture()
def client(store: RecordStore) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def unconfigured_client() -> Generator[TestClient, None, None]:
    """TestClient for a process started without DATABASE_URL."""
    app.dependency_overrides[get_store] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Row helpers ─────────────────────────────────────────────────────────────


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def add_item(store: RecordStore, name: str = "Gantungan Kunci", price: str = "10000", stock: int = 5) -> int:
    with store.session() as db:
        item = StockItem(name=name, price=Decimal(price), stock=stock)
        db.add(item)
        db.flush()
        return item.id


def add_sale(
    store: RecordStore,
    *,
    total: str,
    sold_at: datetime,
    name: str = "Kaos",
    qty: int = 1,
    status: SaleStatus = SaleStatus.PAID,
    buyer: str | None = None,
    stock_item_id: int | None = None,
) -> int:
    with store.session() as db:
        sale = Sale(
            sold_at=to_utc(sold_at),
            stock_item_id=stock_item_id,
            item_name=name,
            unit_price=Decimal(total) / qty,
            qty=qty,
            total_price=Decimal(total),
            buyer_name=buyer,
            status=status,
        )
        db.add(sale)
        db.flush()
        return sale.id


def add_expense(store: RecordStore, *, total: str, bought_at: datetime, description: str | None = "Lakban") -> int:
    with store.session() as db:
        expense = Expense(bought_at=to_utc(bought_at), description=description, total_cost=Decimal(total))
        db.add(expense)
        db.flush()
        return expense.id


# ─── In-memory records for the pure functions ────────────────────────────────


_ids = iter(range(1, 1_000_000))


def sale(total: Any, sold_at: datetime | None = None, **kw: Any) -> SaleRecord:
    data: dict[str, Any] = {
        "id": next(_ids),
        "sold_at": sold_at or utc(2024, 6, 10, 3, 0),
        "item_name": "Kaos",
        "unit_price": total,
        "qty": 1,
        "total_price": total,
        "status": "lunas",
    }
    data.update(kw)
    return SaleRecord.model_validate(data)


def expense(total: Any, bought_at: datetime | None = None, **kw: Any) -> ExpenseRecord:
    data: dict[str, Any] = {
        "id": next(_ids),
        "bought_at": bought_at or utc(2024, 6, 10, 3, 0),
        "description": "Lakban",
        "total_cost": total,
    }
    data.update(kw)
    return ExpenseRecord.model_validate(data)


def item(name: str, stock: int, price: Any = "10000") -> StockItemRecord:
    return StockItemRecord.model_validate(
        {"id": next(_ids), "name": name, "price": price, "stock": stock}
    )
