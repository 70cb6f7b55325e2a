"""Tests for record decoding and the concurrent snapshot loader."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from backend.app.core.errors import LoadError
from backend.app.models.sales import CAPITAL_SALE_NAME, SaleStatus
from backend.app.models.stock import SYSTEM_ITEM_NAME
from backend.app.schemas.records import SaleRecord, StockItemRecord
from backend.app.services.changes import ChangeFeed
from backend.app.services.record_store import RecordStore, build_record_store
from backend.app.services.sales import record_capital_injection
from backend.app.services.snapshot import decode_snapshot, empty_snapshot, load_snapshot
from backend.tests.conftest import add_expense, add_item, add_sale, utc


class FakeStore:
    """Stand-in store returning canned rows or raising per collection."""

    def __init__(self, stock: Any = (), sales: Any = (), expenses: Any = ()) -> None:
        self._data = {"stock": stock, "sales": sales, "expenses": expenses}
        self.feed = ChangeFeed()
        self.calls = 0

    def _get(self, key: str) -> list[dict[str, Any]]:
        self.calls += 1
        value = self._data[key]
        if isinstance(value, Exception):
            raise value
        return list(value)

    def fetch_stock_items(self) -> list[dict[str, Any]]:
        return self._get("stock")

    def fetch_sales(self) -> list[dict[str, Any]]:
        return self._get("sales")

    def fetch_expenses(self) -> list[dict[str, Any]]:
        return self._get("expenses")


# ── Decoding ────────────────────────────────────────────────────────────────


class TestDecoding:
    def test_numeric_strings_are_coerced(self) -> None:
        rec = StockItemRecord.model_validate({"id": 1, "name": "Pin", "price": "12500.50", "stock": "7"})
        assert rec.price == Decimal("12500.50")
        assert rec.stock == 7

    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", "Infinity", True, [1]])
    def test_garbage_numbers_become_zero(self, raw: Any) -> None:
        rec = SaleRecord.model_validate(
            {"id": 1, "sold_at": "2024-06-01T10:00:00Z", "unit_price": raw, "qty": raw, "total_price": raw}
        )
        assert rec.unit_price == 0
        assert rec.qty == 0
        assert rec.total_price == 0

    def test_naive_timestamp_is_utc(self) -> None:
        rec = SaleRecord.model_validate({"id": 1, "sold_at": "2024-06-01 10:00:00", "total_price": 1})
        assert rec.sold_at == datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)

    def test_unknown_status_falls_back_to_paid(self) -> None:
        rec = SaleRecord.model_validate({"id": 1, "sold_at": utc(2024, 1, 1), "status": "refund"})
        assert rec.status is SaleStatus.PAID

    def test_status_aliases(self) -> None:
        rec = SaleRecord.model_validate({"id": 1, "sold_at": utc(2024, 1, 1), "status": "unpaid"})
        assert rec.status is SaleStatus.UNPAID

    def test_capital_flag(self) -> None:
        rec = SaleRecord.model_validate({"id": 1, "sold_at": utc(2024, 1, 1), "item_name": CAPITAL_SALE_NAME})
        assert rec.is_capital

    def test_sentinel_item_dropped_but_its_sales_kept(self) -> None:
        snap = decode_snapshot(
            [{"id": 1, "name": SYSTEM_ITEM_NAME, "price": 0, "stock": 0}, {"id": 2, "name": "Kaos", "price": 1, "stock": 1}],
            [{"id": 9, "sold_at": utc(2024, 1, 1), "stock_item_id": 1, "item_name": CAPITAL_SALE_NAME, "total_price": "100000"}],
            [],
        )
        assert [i.name for i in snap.stock_items] == ["Kaos"]
        assert snap.sales[0].stock_item_id == 1
        assert snap.sales[0].total_price == Decimal("100000")


# ── Loader ──────────────────────────────────────────────────────────────────


class TestLoadSnapshot:
    def test_loads_all_three_collections(self) -> None:
        store = FakeStore(
            stock=[{"id": 1, "name": "Kaos", "price": "10000", "stock": 3}],
            sales=[{"id": 2, "sold_at": utc(2024, 1, 1), "total_price": "10000"}],
            expenses=[{"id": 3, "bought_at": utc(2024, 1, 2), "total_cost": None}],
        )
        snap = asyncio.run(load_snapshot(store))  # type: ignore[arg-type]
        assert snap.configured
        assert len(snap.stock_items) == 1
        assert len(snap.sales) == 1
        assert snap.expenses[0].total_cost == 0
        assert store.calls == 3

    def test_first_failure_wins_in_collection_order(self) -> None:
        store = FakeStore(
            stock=[],
            sales=RuntimeError("sales table offline"),
            expenses=RuntimeError("expenses table offline"),
        )
        with pytest.raises(LoadError, match="sales table offline"):
            asyncio.run(load_snapshot(store))  # type: ignore[arg-type]

    def test_stock_failure_reported_before_others(self) -> None:
        store = FakeStore(
            stock=RuntimeError("permission denied for stock_items"),
            sales=RuntimeError("sales table offline"),
        )
        with pytest.raises(LoadError, match="permission denied"):
            asyncio.run(load_snapshot(store))  # type: ignore[arg-type]

    def test_is_idempotent(self, store: RecordStore) -> None:
        add_item(store, "Kaos", "10000", 4)
        add_sale(store, total="10000", sold_at=utc(2024, 6, 1, 3))
        add_expense(store, total="2000", bought_at=utc(2024, 6, 1, 4))

        first = asyncio.run(load_snapshot(store))
        second = asyncio.run(load_snapshot(store))
        assert first == second

    def test_real_store_ordering_and_sentinel(self, store: RecordStore) -> None:
        add_sale(store, total="1000", sold_at=utc(2024, 6, 1, 3), name="Lama")
        add_sale(store, total="2000", sold_at=utc(2024, 6, 5, 3), name="Baru")
        add_expense(store, total="10", bought_at=utc(2024, 6, 1), description="Pertama")
        add_expense(store, total="20", bought_at=utc(2024, 6, 3), description="Kedua")
        add_item(store, "Kaos", "10000", 4)
        record_capital_injection(store, amount=Decimal("500000"), at=utc(2024, 6, 2))

        snap = asyncio.run(load_snapshot(store))
        assert [i.name for i in snap.stock_items] == ["Kaos"]
        assert [s.item_name for s in snap.sales] == ["Baru", CAPITAL_SALE_NAME, "Lama"]
        assert [e.description for e in snap.expenses] == ["Kedua", "Pertama"]
        assert snap.sales[0].sold_at == utc(2024, 6, 5, 3)


def test_empty_snapshot_is_unconfigured() -> None:
    snap = empty_snapshot()
    assert not snap.configured
    assert snap.stock_items == [] and snap.sales == [] and snap.expenses == []


class TestBuildRecordStore:
    def test_unconfigured_returns_none(self) -> None:
        assert build_record_store(None) is None

    def test_configured(self, session_factory, assets) -> None:
        store = build_record_store(session_factory, assets)
        assert isinstance(store, RecordStore)
        assert store.assets is assets
        store.close()
