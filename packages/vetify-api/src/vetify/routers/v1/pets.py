"""Public v1 pet endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, Pagination, get_db, get_pagination, require_scope
from vetify.models.customer import Customer
from vetify.models.pet import Pet
from vetify.schemas.common import DataResponse, ListResponse
from vetify.schemas.public import PetCreate, PetResponse
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine, count, get_owned, require_location

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/pets", tags=["v1"])

read_pets = require_scope(ApiScope.READ_PETS)
write_pets = require_scope(ApiScope.WRITE_PETS)


@router.get("", response_model=ListResponse[PetResponse])
async def list_pets(
    customer_id: str | None = Query(default=None, alias="customerId"),
    species: str | None = Query(default=None),
    ctx: ApiContext = Depends(read_pets),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[PetResponse]:
    """List living pets, optionally by owner or species."""
    stmt = confine(select(Pet), Pet, ctx.tenant_id, ctx.location_id)
    stmt = stmt.where(Pet.is_deceased.is_(False))
    if customer_id:
        stmt = stmt.where(Pet.customer_id == customer_id)
    if species:
        stmt = stmt.where(Pet.species == species)
    total = await count(db, stmt)
    rows = (
        await db.execute(
            stmt.order_by(Pet.created_at.desc()).limit(page.limit).offset(page.offset)
        )
    ).scalars().all()
    return ListResponse[PetResponse].build(
        [PetResponse.model_validate(r) for r in rows], total, page.limit, page.offset
    )


@router.get("/{pet_id}", response_model=DataResponse[PetResponse])
async def get_pet(
    pet_id: str,
    ctx: ApiContext = Depends(read_pets),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[PetResponse]:
    pet = await get_owned(db, Pet, pet_id, ctx.tenant_id, ctx.location_id, label="Pet")
    return DataResponse[PetResponse](data=PetResponse.model_validate(pet))


@router.post(
    "",
    response_model=DataResponse[PetResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_pet(
    body: PetCreate,
    ctx: ApiContext = Depends(write_pets),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[PetResponse]:
    """Register a pet for an existing customer of the key's tenant."""
    location_id = ctx.resolve_location(body.location_id or ctx.location_id)
    customer = await get_owned(db, Customer, body.customer_id, ctx.tenant_id, label="Customer")
    if location_id is None:
        location_id = customer.location_id
    ctx.check_record_location(location_id, customer.location_id, label="Customer")
    if location_id is not None:
        await require_location(db, ctx.tenant_id, location_id)

    pet = Pet(
        tenant_id=ctx.tenant_id,
        customer_id=customer.id,
        location_id=location_id,
        name=body.name,
        species=body.species,
        breed=body.breed,
        date_of_birth=body.date_of_birth,
        gender=body.gender,
        weight=body.weight,
        weight_unit=body.weight_unit,
        microchip_number=body.microchip_number,
        is_neutered=body.is_neutered,
    )
    db.add(pet)
    await db.flush()
    logger.info("Created pet %s via API key %s", pet.id, ctx.api_key.id)
    return DataResponse[PetResponse](data=PetResponse.model_validate(pet))
