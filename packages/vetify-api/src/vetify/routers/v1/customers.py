"""Public v1 customer endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, Pagination, get_db, get_pagination, require_scope
from vetify.models.customer import Customer
from vetify.schemas.common import DataResponse, ListResponse
from vetify.schemas.public import CustomerCreate, CustomerResponse
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine, count, get_owned, require_location

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/customers", tags=["v1"])

read_customers = require_scope(ApiScope.READ_CUSTOMERS)
write_customers = require_scope(ApiScope.WRITE_CUSTOMERS)


@router.get("", response_model=ListResponse[CustomerResponse])
async def list_customers(
    search: str | None = Query(default=None, max_length=100),
    ctx: ApiContext = Depends(read_customers),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[CustomerResponse]:
    """List active customers, optionally filtered by name, email or phone."""
    stmt = confine(select(Customer), Customer, ctx.tenant_id, ctx.location_id)
    stmt = stmt.where(Customer.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )
    total = await count(db, stmt)
    rows = (
        await db.execute(
            stmt.order_by(Customer.created_at.desc()).limit(page.limit).offset(page.offset)
        )
    ).scalars().all()
    return ListResponse[CustomerResponse].build(
        [CustomerResponse.model_validate(r) for r in rows], total, page.limit, page.offset
    )


@router.get("/{customer_id}", response_model=DataResponse[CustomerResponse])
async def get_customer(
    customer_id: str,
    ctx: ApiContext = Depends(read_customers),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[CustomerResponse]:
    customer = await get_owned(
        db, Customer, customer_id, ctx.tenant_id, ctx.location_id, label="Customer"
    )
    return DataResponse[CustomerResponse](data=CustomerResponse.model_validate(customer))


@router.post(
    "",
    response_model=DataResponse[CustomerResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    body: CustomerCreate,
    ctx: ApiContext = Depends(write_customers),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[CustomerResponse]:
    location_id = ctx.resolve_location(body.location_id or ctx.location_id)
    if location_id is not None:
        await require_location(db, ctx.tenant_id, location_id)

    customer = Customer(
        tenant_id=ctx.tenant_id,
        location_id=location_id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        address=body.address,
        notes=body.notes,
    )
    db.add(customer)
    await db.flush()
    logger.info("Created customer %s via API key %s", customer.id, ctx.api_key.id)
    return DataResponse[CustomerResponse](data=CustomerResponse.model_validate(customer))
