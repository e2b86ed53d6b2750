"""Schemas for the v1 analytics reports."""

import datetime
from typing import Literal

from vetify.schemas.common import CamelModel

SalesGroupBy = Literal["day", "week", "month", "category"]


class SalesSummary(CamelModel):
    total_sales: int
    total_revenue: float
    average_order_value: float
    period_start: datetime.datetime
    period_end: datetime.datetime


class SalesBreakdownEntry(CamelModel):
    date: datetime.date | None = None
    category: str | None = None
    count: int
    revenue: float


class SalesReport(CamelModel):
    summary: SalesSummary
    breakdown: list[SalesBreakdownEntry]


class InventorySummary(CamelModel):
    total_items: int
    total_value: float
    low_stock_count: int
    out_of_stock_count: int
    expiring_soon_count: int


class CategoryTotals(CamelModel):
    category: str
    count: int
    total_value: float


class LowStockItem(CamelModel):
    id: str
    name: str
    category: str
    quantity: float
    min_stock: float
    location_id: str | None


class ExpiringItem(CamelModel):
    id: str
    name: str
    category: str
    quantity: float
    expiration_date: datetime.datetime
    location_id: str | None


class InventoryReport(CamelModel):
    summary: InventorySummary
    by_category: list[CategoryTotals]
    low_stock_items: list[LowStockItem]
    expiring_items: list[ExpiringItem]
