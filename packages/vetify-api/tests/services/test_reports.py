"""Tests for vetify.services.reports."""

from datetime import date, datetime, timedelta, timezone

import pytest

from vetify.models import InventoryItem, Sale, SaleItem
from vetify.services.reports import build_inventory_report, build_sales_report, is_low_stock

START = datetime(2026, 10, 1, tzinfo=timezone.utc)
END = datetime(2026, 11, 1, tzinfo=timezone.utc)
NOW = datetime(2026, 10, 18, 12, tzinfo=timezone.utc)


def _sale(when: datetime, *lines: tuple[str, float]) -> Sale:
    return Sale(
        tenant_id="t",
        total=sum(total for _, total in lines),
        created_at=when,
        items=[SaleItem(description=c, category=c, total=t) for c, t in lines],
    )


def _item(name: str, quantity: float, **extra) -> InventoryItem:
    extra.setdefault("category", "MEDICINE")
    extra.setdefault("min_stock", None)
    extra.setdefault("cost", None)
    extra.setdefault("expiration_date", None)
    return InventoryItem(id=name, tenant_id="t", name=name, quantity=quantity, **extra)


class TestSalesReport:
    def test_no_sales(self):
        report = build_sales_report([], START, END)
        assert report.summary.total_sales == 0
        assert report.summary.total_revenue == 0
        assert report.summary.average_order_value == 0.0
        assert report.breakdown == []

    def test_daily_breakdown_sorted(self):
        sales = [
            _sale(datetime(2026, 10, 9, 8, tzinfo=timezone.utc), ("MEDICINE", 10.0)),
            _sale(datetime(2026, 10, 2, 8, tzinfo=timezone.utc), ("MEDICINE", 20.0)),
            _sale(datetime(2026, 10, 2, 20, tzinfo=timezone.utc), ("FOOD", 5.5)),
        ]
        report = build_sales_report(sales, START, END)
        assert [(e.date, e.count) for e in report.breakdown] == [
            (date(2026, 10, 2), 2),
            (date(2026, 10, 9), 1),
        ]
        assert report.breakdown[0].revenue == 25.5
        assert report.summary.average_order_value == 11.83

    @pytest.mark.parametrize(
        "group_by, expected",
        [
            ("week", [date(2026, 9, 28), date(2026, 10, 5)]),
            ("month", [date(2026, 10, 1)]),
        ],
    )
    def test_weekly_and_monthly_buckets(self, group_by, expected):
        sales = [
            _sale(datetime(2026, 10, 1, tzinfo=timezone.utc), ("MEDICINE", 1.0)),
            _sale(datetime(2026, 10, 4, tzinfo=timezone.utc), ("MEDICINE", 1.0)),
            _sale(datetime(2026, 10, 6, tzinfo=timezone.utc), ("MEDICINE", 1.0)),
        ]
        report = build_sales_report(sales, START, END, group_by)
        assert [e.date for e in report.breakdown] == expected
        assert sum(e.count for e in report.breakdown) == 3

    def test_naive_timestamps_are_read_as_utc(self):
        sales = [_sale(datetime(2026, 10, 3, 23, 30), ("MEDICINE", 1.0))]
        report = build_sales_report(sales, START, END)
        assert report.breakdown[0].date == date(2026, 10, 3)

    def test_category_breakdown_counts_lines(self):
        sales = [
            _sale(NOW, ("MEDICINE", 30.0), ("CONSULTATION", 50.0)),
            _sale(NOW, ("MEDICINE", 12.0)),
        ]
        report = build_sales_report(sales, START, END, "category")
        assert [(e.category, e.count, e.revenue) for e in report.breakdown] == [
            ("CONSULTATION", 1, 50.0),
            ("MEDICINE", 2, 42.0),
        ]
        assert all(e.date is None for e in report.breakdown)
        assert report.summary.total_sales == 2


class TestLowStock:
    @pytest.mark.parametrize(
        "quantity, min_stock, expected",
        [(3, 5, True), (5, 5, True), (6, 5, False), (0, 5, False), (3, None, False)],
    )
    def test_threshold(self, quantity, min_stock, expected):
        assert is_low_stock(_item("x", quantity, min_stock=min_stock)) is expected


class TestInventoryReport:
    def test_empty(self):
        report = build_inventory_report([], now=NOW)
        assert report.summary.total_items == 0
        assert report.summary.total_value == 0
        assert report.by_category == []

    def test_value_uses_cost_and_ignores_missing_cost(self):
        items = [
            _item("a", 3, cost=2.5),
            _item("b", 10),
            _item("c", 4, category="VACCINE", cost=10),
        ]
        report = build_inventory_report(items, now=NOW)
        assert report.summary.total_value == 47.5
        assert [(c.category, c.count, c.total_value) for c in report.by_category] == [
            ("MEDICINE", 2, 7.5),
            ("VACCINE", 1, 40.0),
        ]

    def test_expiring_window_is_thirty_days(self):
        items = [
            _item("later", 1, expiration_date=NOW + timedelta(days=20)),
            _item("soon", 1, expiration_date=NOW + timedelta(days=2)),
            _item("too-far", 1, expiration_date=NOW + timedelta(days=31)),
            _item("expired", 1, expiration_date=NOW - timedelta(days=1)),
        ]
        report = build_inventory_report(items, now=NOW)
        assert report.summary.expiring_soon_count == 2
        assert [i.id for i in report.expiring_items] == ["soon", "later"]

    def test_out_of_stock_is_not_low_stock(self):
        items = [_item("empty", 0, min_stock=2), _item("low", 1, min_stock=2)]
        report = build_inventory_report(items, now=NOW)
        assert report.summary.out_of_stock_count == 1
        assert report.summary.low_stock_count == 1
        assert [i.id for i in report.low_stock_items] == ["low"]
