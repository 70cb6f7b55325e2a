"""Tests for catalog and expense mutations."""
from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal

import pytest

from backend.app.core.errors import NotFound, ValidationFailed
from backend.app.models.expense import Expense
from backend.app.models.sales import Sale
from backend.app.models.stock import StockItem
from backend.app.services.expenses import (
    compose_description,
    delete_expense,
    record_expense,
    update_expense,
)
from backend.app.services.file_service import ITEM_BUCKET, AssetStore, generate_file_name, name_from_url
from backend.app.services.record_store import RecordStore
from backend.app.services.sales import create_sale, record_capital_injection
from backend.app.services.stock import (
    create_stock_item,
    delete_stock_items,
    set_stock,
    update_price,
)
from backend.tests.conftest import add_item, utc


# ── Stock items ─────────────────────────────────────────────────────────────


class TestCreateStockItem:
    def test_plain_item(self, store: RecordStore) -> None:
        rec = create_stock_item(store, name="  Pin Enamel ", price=Decimal("15000"), stock=12)
        assert rec.name == "Pin Enamel"
        assert rec.price == Decimal("15000")
        assert rec.stock == 12
        assert rec.image_url is None

    def test_image_uploaded_to_item_bucket(self, store: RecordStore, assets: AssetStore) -> None:
        rec = create_stock_item(store, name="Mug", price=Decimal("30000"), stock=3, image=b"RIFF0000WEBP")
        name = name_from_url(rec.image_url)
        assert rec.image_url == f"/files/item/{name}"
        assert re.fullmatch(r"item_\d{13}_[0-9a-z]{6}\.webp", name or "")
        assert assets.read(ITEM_BUCKET, name) == b"RIFF0000WEBP"

    @pytest.mark.parametrize(
        "kwargs,key",
        [
            ({"name": " ", "price": Decimal("1"), "stock": 1}, "item_name_required"),
            ({"name": "Mug", "price": Decimal("-1"), "stock": 1}, "invalid_price"),
            ({"name": "Mug", "price": Decimal("1"), "stock": -2}, "invalid_stock"),
        ],
    )
    def test_validation(self, store: RecordStore, kwargs: dict, key: str) -> None:
        with pytest.raises(ValidationFailed) as exc:
            create_stock_item(store, **kwargs)
        assert exc.value.key == key

    def test_upload_failure_aborts(self, store: RecordStore, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(*_: object) -> str:
            raise OSError("disk full")

        monkeypatch.setattr(store.assets, "upload", broken)
        with pytest.raises(ValidationFailed) as exc:
            create_stock_item(store, name="Mug", price=Decimal("1"), stock=1, image=b"x")
        assert exc.value.key == "upload_failed"
        assert exc.value.params == {"reason": "disk full"}
        with store.session() as db:
            assert db.query(StockItem).count() == 0


class TestEditStock:
    def test_update_price(self, store: RecordStore) -> None:
        item_id = add_item(store, "Kaos", "10000", 5)
        assert update_price(store, item_id, Decimal("12500")).price == Decimal("12500")

    def test_price_zero_allowed_negative_rejected(self, store: RecordStore) -> None:
        item_id = add_item(store, "Kaos", "10000", 5)
        assert update_price(store, item_id, Decimal("0")).price == 0
        with pytest.raises(ValidationFailed):
            update_price(store, item_id, Decimal("-1"))

    def test_set_stock_is_absolute(self, store: RecordStore) -> None:
        item_id = add_item(store, "Kaos", "10000", 5)
        assert set_stock(store, item_id, 40).stock == 40
        assert set_stock(store, item_id, 0).stock == 0

    def test_set_stock_rejects_negative(self, store: RecordStore) -> None:
        item_id = add_item(store, "Kaos", "10000", 5)
        with pytest.raises(ValidationFailed) as exc:
            set_stock(store, item_id, -1)
        assert exc.value.key == "invalid_stock_amount"

    def test_missing_item(self, store: RecordStore) -> None:
        with pytest.raises(NotFound):
            set_stock(store, 12345, 1)


class TestDeleteStockItems:
    def test_removes_rows_images_and_clears_sale_reference(self, store: RecordStore, assets: AssetStore) -> None:
        rec = create_stock_item(store, name="Mug", price=Decimal("30000"), stock=3, image=b"img")
        other = add_item(store, "Kaos", "10000", 1)
        sale = create_sale(store, stock_item_id=rec.id, qty=1)

        assert delete_stock_items(store, [rec.id]) == 1

        assert assets.list(ITEM_BUCKET) == []
        with store.session() as db:
            assert [i.id for i in db.query(StockItem).all()] == [other]
            stored = db.get(Sale, sale.id)
            assert stored.stock_item_id is None
            assert stored.item_name == "Mug"

    def test_empty_list_is_noop(self, store: RecordStore) -> None:
        add_item(store, "Kaos", "10000", 1)
        assert delete_stock_items(store, []) == 0

    def test_asset_failure_logged_not_raised(
        self, store: RecordStore, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture,
    ) -> None:
        rec = create_stock_item(store, name="Mug", price=Decimal("30000"), stock=3, image=b"img")

        def broken(*_: object) -> None:
            raise OSError("bucket unavailable")

        monkeypatch.setattr(store.assets, "remove", broken)
        with caplog.at_level(logging.WARNING):
            assert delete_stock_items(store, [rec.id]) == 1
        assert "bucket unavailable" in caplog.text
        with store.session() as db:
            assert db.query(StockItem).count() == 0

    def test_capital_anchor_is_not_deleted(self, store: RecordStore) -> None:
        capital = record_capital_injection(store, amount=Decimal("1000"))
        assert delete_stock_items(store, [capital.stock_item_id]) == 0


# ── Asset helpers ───────────────────────────────────────────────────────────


def test_generated_names_are_unique() -> None:
    names = {generate_file_name() for _ in range(50)}
    assert len(names) == 50


def test_upload_refuses_overwrite(assets: AssetStore) -> None:
    assets.upload("promo", "promo_1.webp", b"a")
    with pytest.raises(FileExistsError):
        assets.upload("promo", "promo_1.webp", b"b")


# ── Expenses ────────────────────────────────────────────────────────────────


class TestExpenses:
    def test_description_and_total(self, store: RecordStore) -> None:
        rec = record_expense(
            store,
            item="Plastik",
            unit_price=Decimal("2000"),
            qty=3,
            other_cost=Decimal("1500"),
            note="ongkir",
            bought_at=utc(2024, 6, 1, 2),
        )
        assert rec.description == "Plastik (Qty: 3) - ongkir"
        assert rec.total_cost == Decimal("7500")
        assert rec.bought_at == utc(2024, 6, 1, 2)

    def test_description_without_note(self) -> None:
        assert compose_description("Lakban", 2) == "Lakban (Qty: 2)"
        assert compose_description("Lakban", 2, "  ") == "Lakban (Qty: 2)"

    @pytest.mark.parametrize(
        "kwargs,key",
        [
            ({"item": "", "unit_price": Decimal("1"), "qty": 1}, "expense_item_required"),
            ({"item": "Lakban", "unit_price": Decimal("-1"), "qty": 1}, "invalid_price"),
            ({"item": "Lakban", "unit_price": Decimal("1"), "qty": 0}, "qty_must_be_positive"),
            ({"item": "Lakban", "unit_price": Decimal("1"), "qty": 1, "other_cost": Decimal("-1")}, "invalid_cost"),
        ],
    )
    def test_validation(self, store: RecordStore, kwargs: dict, key: str) -> None:
        with pytest.raises(ValidationFailed) as exc:
            record_expense(store, **kwargs)
        assert exc.value.key == key

    def test_update_and_delete(self, store: RecordStore) -> None:
        rec = record_expense(store, item="Lakban", unit_price=Decimal("5000"), qty=1)
        when = datetime.fromisoformat("2024-06-03T10:00:00+07:00")
        updated = update_expense(store, rec.id, description="Lakban besar", total_cost=Decimal("8000"), bought_at=when)
        assert updated.description == "Lakban besar"
        assert updated.total_cost == Decimal("8000")
        assert updated.bought_at == when

        delete_expense(store, rec.id)
        with store.session() as db:
            assert db.query(Expense).count() == 0
        with pytest.raises(NotFound):
            delete_expense(store, rec.id)
