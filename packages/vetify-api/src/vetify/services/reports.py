"""Aggregations behind the v1 sales and inventory reports.

Both builders take already-confined rows, so tenant and location filtering
stays in the router alongside every other v1 query.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from vetify.models.inventory_item import InventoryItem
from vetify.models.sale import Sale
from vetify.schemas.reports import (
    CategoryTotals,
    ExpiringItem,
    InventoryReport,
    InventorySummary,
    LowStockItem,
    SalesBreakdownEntry,
    SalesGroupBy,
    SalesReport,
    SalesSummary,
)
from vetify.services.authentication import as_utc

EXPIRING_SOON_DAYS = 30


def _money(value: float) -> float:
    return round(value, 2)


def _period_start(day: date, group_by: SalesGroupBy) -> date:
    if group_by == "week":
        return day - timedelta(days=day.weekday())
    if group_by == "month":
        return day.replace(day=1)
    return day


def build_sales_report(
    sales: Iterable[Sale],
    period_start: datetime,
    period_end: datetime,
    group_by: SalesGroupBy = "day",
) -> SalesReport:
    """Summarize completed sales and break them down by period or category.

    A category breakdown counts sale lines, not sales: one sale of a
    medicine plus a consultation adds to two categories.
    """
    sales = list(sales)
    revenue = sum(s.total for s in sales)

    counts: dict = defaultdict(int)
    totals: dict = defaultdict(float)
    if group_by == "category":
        for sale in sales:
            for line in sale.items:
                counts[line.category] += 1
                totals[line.category] += line.total
        breakdown = [
            SalesBreakdownEntry(category=key, count=counts[key], revenue=_money(totals[key]))
            for key in sorted(counts)
        ]
    else:
        for sale in sales:
            key = _period_start(as_utc(sale.created_at).date(), group_by)
            counts[key] += 1
            totals[key] += sale.total
        breakdown = [
            SalesBreakdownEntry(date=key, count=counts[key], revenue=_money(totals[key]))
            for key in sorted(counts)
        ]

    return SalesReport(
        summary=SalesSummary(
            total_sales=len(sales),
            total_revenue=_money(revenue),
            average_order_value=_money(revenue / len(sales)) if sales else 0.0,
            period_start=period_start,
            period_end=period_end,
        ),
        breakdown=breakdown,
    )


def is_low_stock(item: InventoryItem) -> bool:
    return item.min_stock is not None and 0 < item.quantity <= item.min_stock


def build_inventory_report(
    items: Iterable[InventoryItem], now: datetime | None = None
) -> InventoryReport:
    """Stock value, low stock and items expiring within the next 30 days.

    Value is quantity times unit cost; items without a cost add nothing.
    """
    items = list(items)
    now = now or datetime.now(timezone.utc)
    horizon = now + timedelta(days=EXPIRING_SOON_DAYS)

    by_category: dict[str, list[InventoryItem]] = defaultdict(list)
    for item in items:
        by_category[item.category].append(item)

    def value(item: InventoryItem) -> float:
        return item.quantity * (item.cost or 0)

    low_stock = [i for i in items if is_low_stock(i)]
    expiring = sorted(
        (
            i
            for i in items
            if i.expiration_date is not None and now <= as_utc(i.expiration_date) <= horizon
        ),
        key=lambda i: as_utc(i.expiration_date),
    )

    return InventoryReport(
        summary=InventorySummary(
            total_items=len(items),
            total_value=_money(sum(value(i) for i in items)),
            low_stock_count=len(low_stock),
            out_of_stock_count=sum(1 for i in items if i.quantity <= 0),
            expiring_soon_count=len(expiring),
        ),
        by_category=[
            CategoryTotals(
                category=category,
                count=len(group),
                total_value=_money(sum(value(i) for i in group)),
            )
            for category, group in sorted(by_category.items())
        ],
        low_stock_items=[
            LowStockItem(
                id=i.id,
                name=i.name,
                category=i.category,
                quantity=i.quantity,
                min_stock=i.min_stock,
                location_id=i.location_id,
            )
            for i in low_stock
        ],
        expiring_items=[
            ExpiringItem(
                id=i.id,
                name=i.name,
                category=i.category,
                quantity=i.quantity,
                expiration_date=as_utc(i.expiration_date),
                location_id=i.location_id,
            )
            for i in expiring
        ],
    )
