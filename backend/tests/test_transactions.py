"""Tests for the range filter and the merged transaction feed."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from backend.app.services.transactions import (
    StatusFilter,
    filter_by_range,
    filter_transactions,
    merge_transactions,
    recent_transactions,
)
from backend.tests.conftest import expense, sale

JKT = ZoneInfo("Asia/Jakarta")


class TestRangeFilter:
    FROM = date(2024, 6, 10)
    TO = date(2024, 6, 12)

    def test_both_ends_inclusive(self) -> None:
        at_start = sale("1", sold_at=datetime(2024, 6, 10, 0, 0, 0, tzinfo=JKT))
        at_end = sale("2", sold_at=datetime(2024, 6, 12, 23, 59, 59, tzinfo=JKT))
        day_before = sale("3", sold_at=datetime(2024, 6, 9, 23, 59, 59, tzinfo=JKT))
        day_after = sale("4", sold_at=datetime(2024, 6, 13, 0, 0, 0, tzinfo=JKT))

        result = filter_by_range([at_start, at_end, day_before, day_after], self.FROM, self.TO, tz=JKT)
        assert result == [at_start, at_end]

    def test_last_microsecond_of_day_included(self) -> None:
        edge = sale("1", sold_at=datetime(2024, 6, 12, 23, 59, 59, 999999, tzinfo=JKT))
        assert filter_by_range([edge], self.FROM, self.TO, tz=JKT) == [edge]

    def test_applies_to_expenses(self) -> None:
        inside = expense("100", bought_at=datetime(2024, 6, 11, 12, 0, tzinfo=JKT))
        outside = expense("100", bought_at=datetime(2024, 6, 20, 12, 0, tzinfo=JKT))
        assert filter_by_range([inside, outside], self.FROM, self.TO, tz=JKT) == [inside]

    def test_local_day_boundaries_not_utc(self) -> None:
        # 17:30 UTC on the 9th is 00:30 on the 10th in Jakarta
        early = sale("1", sold_at=datetime(2024, 6, 9, 17, 30, tzinfo=ZoneInfo("UTC")))
        assert filter_by_range([early], self.FROM, self.TO, tz=JKT) == [early]

    def test_inverted_range_is_empty(self) -> None:
        s = sale("1", sold_at=datetime(2024, 6, 11, 12, 0, tzinfo=JKT))
        assert filter_by_range([s], self.TO, self.FROM, tz=JKT) == []

    def test_single_day_range(self) -> None:
        s = sale("1", sold_at=datetime(2024, 6, 11, 12, 0, tzinfo=JKT))
        assert filter_by_range([s], date(2024, 6, 11), date(2024, 6, 11), tz=JKT) == [s]


class TestMerge:
    def test_sorted_newest_first(self) -> None:
        base = datetime(2024, 6, 10, 9, 0, tzinfo=JKT)
        sales = [sale("1", sold_at=base), sale("2", sold_at=base + timedelta(hours=2))]
        expenses = [expense("3", bought_at=base + timedelta(hours=1))]

        merged = merge_transactions(sales, expenses)
        dates = [t.date for t in merged]
        assert dates == sorted(dates, reverse=True)
        assert [t.type for t in merged] == ["sale", "expense", "sale"]

    def test_tie_puts_sale_first(self) -> None:
        moment = datetime(2024, 6, 10, 9, 0, tzinfo=JKT)
        e = expense("500", bought_at=moment)
        s = sale("700", sold_at=moment)
        merged = merge_transactions([s], [e])
        assert [t.type for t in merged] == ["sale", "expense"]

    def test_entry_shape(self) -> None:
        s = sale("30000", qty=3, unit_price="10000", buyer_name="Budi", stock_item_id=4)
        e = expense("2500", description=None)
        by_type = {t.type: t for t in merge_transactions([s], [e])}

        sale_tx = by_type["sale"]
        assert sale_tx.id == f"sale-{s.id}"
        assert sale_tx.record_id == s.id
        assert sale_tx.amount == Decimal("30000")
        assert sale_tx.qty == 3
        assert sale_tx.unit_price == Decimal("10000")
        assert sale_tx.detail == "Budi"
        assert sale_tx.stock_item_id == 4

        expense_tx = by_type["expense"]
        assert expense_tx.id == f"expense-{e.id}"
        assert expense_tx.name == "Pengeluaran"
        assert expense_tx.amount == Decimal("-2500")
        assert expense_tx.status is None

    def test_recent_limits_to_five(self) -> None:
        base = datetime(2024, 6, 1, tzinfo=JKT)
        sales = [sale(str(i), sold_at=base + timedelta(days=i)) for i in range(8)]
        recent = recent_transactions(sales, [])
        assert len(recent) == 5
        assert recent[0].amount == Decimal("7")


class TestFilters:
    def _feed(self) -> list:
        moment = datetime(2024, 6, 10, 9, 0, tzinfo=JKT)
        return merge_transactions(
            [
                sale("10000", sold_at=moment, item_name="Kaos Hitam", buyer_name="Siti", status="lunas"),
                sale("20000", sold_at=moment, item_name="Topi", buyer_name="Andi", status="belum_bayar"),
            ],
            [expense("5000", bought_at=moment, description="Plastik Kaos (Qty: 2)")],
        )

    def test_unpaid_excludes_expenses(self) -> None:
        result = filter_transactions(self._feed(), "belum_bayar")
        assert [t.name for t in result] == ["Topi"]
        assert all(t.type == "sale" for t in result)

    @pytest.mark.parametrize("value,expected", [("paid", "Kaos Hitam"), ("unpaid", "Topi"), ("lunas", "Kaos Hitam")])
    def test_english_aliases(self, value: str, expected: str) -> None:
        assert [t.name for t in filter_transactions(self._feed(), value)] == [expected]

    def test_all_keeps_everything(self) -> None:
        assert len(filter_transactions(self._feed(), StatusFilter.ALL)) == 3

    def test_search_matches_name_and_buyer_case_insensitive(self) -> None:
        assert {t.type for t in filter_transactions(self._feed(), search="KAOS")} == {"sale", "expense"}
        assert [t.name for t in filter_transactions(self._feed(), search="andi")] == ["Topi"]

    def test_blank_search_is_noop(self) -> None:
        assert len(filter_transactions(self._feed(), search="   ")) == 3

    def test_filters_compose(self) -> None:
        result = filter_transactions(self._feed(), "paid", search="kaos")
        assert [t.name for t in result] == ["Kaos Hitam"]

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValueError):
            filter_transactions(self._feed(), "refunded")
