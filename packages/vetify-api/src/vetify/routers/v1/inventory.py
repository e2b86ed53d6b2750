"""Public v1 inventory endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, Pagination, get_db, get_pagination, require_scope
from vetify.models.inventory_item import InventoryItem
from vetify.schemas.common import DataResponse, ListResponse
from vetify.schemas.public import (
    InventoryCategory,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventoryStatus,
)
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine, count, get_owned, require_location

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/inventory", tags=["v1"])

read_inventory = require_scope(ApiScope.READ_INVENTORY)
write_inventory = require_scope(ApiScope.WRITE_INVENTORY)


@router.get("", response_model=ListResponse[InventoryItemResponse])
async def list_inventory(
    category: InventoryCategory | None = Query(default=None),
    item_status: InventoryStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=100),
    ctx: ApiContext = Depends(read_inventory),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[InventoryItemResponse]:
    """List inventory items by name, optionally filtered by category, status or text."""
    stmt = confine(select(InventoryItem), InventoryItem, ctx.tenant_id, ctx.location_id)
    if category is not None:
        stmt = stmt.where(InventoryItem.category == category)
    if item_status is not None:
        stmt = stmt.where(InventoryItem.status == item_status)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                InventoryItem.name.ilike(pattern),
                InventoryItem.active_compound.ilike(pattern),
                InventoryItem.brand.ilike(pattern),
            )
        )
    total = await count(db, stmt)
    rows = (
        await db.execute(
            stmt.order_by(InventoryItem.name).limit(page.limit).offset(page.offset)
        )
    ).scalars().all()
    return ListResponse[InventoryItemResponse].build(
        [InventoryItemResponse.model_validate(r) for r in rows], total, page.limit, page.offset
    )


@router.get("/{item_id}", response_model=DataResponse[InventoryItemResponse])
async def get_inventory_item(
    item_id: str,
    ctx: ApiContext = Depends(read_inventory),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[InventoryItemResponse]:
    item = await get_owned(
        db, InventoryItem, item_id, ctx.tenant_id, ctx.location_id, label="Inventory item"
    )
    return DataResponse[InventoryItemResponse](data=InventoryItemResponse.model_validate(item))


@router.post(
    "",
    response_model=DataResponse[InventoryItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_inventory_item(
    body: InventoryItemCreate,
    ctx: ApiContext = Depends(write_inventory),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[InventoryItemResponse]:
    location_id = ctx.resolve_location(body.location_id or ctx.location_id)
    if location_id is not None:
        await require_location(db, ctx.tenant_id, location_id)

    item = InventoryItem(
        tenant_id=ctx.tenant_id,
        location_id=location_id,
        **body.model_dump(exclude={"location_id"}),
    )
    db.add(item)
    await db.flush()
    logger.info("Created inventory item %s via API key %s", item.id, ctx.api_key.id)
    return DataResponse[InventoryItemResponse](data=InventoryItemResponse.model_validate(item))


@router.put("/{item_id}", response_model=DataResponse[InventoryItemResponse])
async def update_inventory_item(
    item_id: str,
    body: InventoryItemUpdate,
    ctx: ApiContext = Depends(write_inventory),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[InventoryItemResponse]:
    """Update the fields present in the body. Moving an item checks the target location."""
    item = await get_owned(
        db, InventoryItem, item_id, ctx.tenant_id, ctx.location_id, label="Inventory item"
    )
    changes = body.model_dump(exclude_unset=True)

    if "location_id" in changes:
        location_id = ctx.resolve_location(changes.pop("location_id"))
        if location_id is not None:
            await require_location(db, ctx.tenant_id, location_id)
        item.location_id = location_id
    for field, value in changes.items():
        if value is None and field in ("name", "category", "quantity", "status"):
            continue
        setattr(item, field, value)

    await db.flush()
    logger.info(
        "Updated inventory item %s fields %s via API key %s",
        item.id,
        sorted(body.model_fields_set),
        ctx.api_key.id,
    )
    return DataResponse[InventoryItemResponse](data=InventoryItemResponse.model_validate(item))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: str,
    ctx: ApiContext = Depends(write_inventory),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Soft delete: the item is marked DISCONTINUED and stays readable."""
    item = await get_owned(
        db, InventoryItem, item_id, ctx.tenant_id, ctx.location_id, label="Inventory item"
    )
    item.status = "DISCONTINUED"
    await db.flush()
    logger.info("Discontinued inventory item %s via API key %s", item.id, ctx.api_key.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
