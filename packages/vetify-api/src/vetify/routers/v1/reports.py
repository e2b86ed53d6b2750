"""Public v1 analytics reports."""

from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, get_db, require_scope
from vetify.errors import ValidationFailure
from vetify.models.inventory_item import InventoryItem
from vetify.models.sale import Sale
from vetify.schemas.common import DataResponse
from vetify.schemas.public import InventoryCategory
from vetify.schemas.reports import InventoryReport, SalesGroupBy, SalesReport
from vetify.services.reports import build_inventory_report, build_sales_report
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine

router = APIRouter(prefix="/api/v1/reports", tags=["v1"])

read_reports = require_scope(ApiScope.READ_REPORTS)


@router.get("/sales", response_model=DataResponse[SalesReport])
async def sales_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    group_by: SalesGroupBy = Query(default="day", alias="groupBy"),
    ctx: ApiContext = Depends(read_reports),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[SalesReport]:
    """Completed sales between two dates, both inclusive."""
    if start_date > end_date:
        raise ValidationFailure("start_date must be before end_date")

    period_start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    period_end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    stmt = (
        confine(select(Sale), Sale, ctx.tenant_id, ctx.location_id)
        .where(Sale.status == "COMPLETED")
        .where(Sale.created_at >= period_start)
        .where(Sale.created_at < period_end)
        .order_by(Sale.created_at)
    )
    sales = (await db.execute(stmt)).scalars().all()
    return DataResponse[SalesReport](
        data=build_sales_report(sales, period_start, period_end, group_by)
    )


@router.get("/inventory", response_model=DataResponse[InventoryReport])
async def inventory_report(
    category: InventoryCategory | None = Query(default=None),
    ctx: ApiContext = Depends(read_reports),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[InventoryReport]:
    """Stock levels of every item that has not been discontinued."""
    stmt = confine(select(InventoryItem), InventoryItem, ctx.tenant_id, ctx.location_id)
    stmt = stmt.where(InventoryItem.status != "DISCONTINUED")
    if category is not None:
        stmt = stmt.where(InventoryItem.category == category)
    items = (await db.execute(stmt.order_by(InventoryItem.name))).scalars().all()
    return DataResponse[InventoryReport](data=build_inventory_report(items))
