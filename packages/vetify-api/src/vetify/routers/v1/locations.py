"""Public v1 location endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, Pagination, get_db, get_pagination, require_scope
from vetify.models.location import Location
from vetify.schemas.common import DataResponse, ListResponse
from vetify.schemas.public import LocationResponse
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine, count, get_owned

router = APIRouter(prefix="/api/v1/locations", tags=["v1"])

read_locations = require_scope(ApiScope.READ_LOCATIONS)


@router.get("", response_model=ListResponse[LocationResponse])
async def list_locations(
    ctx: ApiContext = Depends(read_locations),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[LocationResponse]:
    """List active locations. A location-bound key sees only its own."""
    stmt = confine(select(Location), Location, ctx.tenant_id, ctx.location_id)
    stmt = stmt.where(Location.is_active.is_(True))
    total = await count(db, stmt)
    rows = (
        await db.execute(
            stmt.order_by(Location.is_primary.desc(), Location.name)
            .limit(page.limit)
            .offset(page.offset)
        )
    ).scalars().all()
    return ListResponse[LocationResponse].build(
        [LocationResponse.model_validate(r) for r in rows], total, page.limit, page.offset
    )


@router.get("/{location_id}", response_model=DataResponse[LocationResponse])
async def get_location(
    location_id: str,
    ctx: ApiContext = Depends(read_locations),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[LocationResponse]:
    allowed = ctx.resolve_location(location_id)
    location = await get_owned(db, Location, location_id, ctx.tenant_id, allowed, label="Location")
    return DataResponse[LocationResponse](data=LocationResponse.model_validate(location))
