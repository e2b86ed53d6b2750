"""Public v1 appointment endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.dependencies import ApiContext, Pagination, get_db, get_pagination, require_scope
from vetify.errors import Conflict, NotFound
from vetify.models.appointment import FINAL_STATUSES, Appointment
from vetify.models.pet import Pet
from vetify.schemas.common import DataResponse, ListResponse
from vetify.schemas.public import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentUpdate,
)
from vetify.services.scopes import ApiScope
from vetify.services.tenancy import confine, count, get_owned, require_location

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/appointments", tags=["v1"])

read_appointments = require_scope(ApiScope.READ_APPOINTMENTS)
write_appointments = require_scope(ApiScope.WRITE_APPOINTMENTS)


@router.get("", response_model=ListResponse[AppointmentResponse])
async def list_appointments(
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    appointment_status: AppointmentStatus | None = Query(default=None, alias="status"),
    pet_id: str | None = Query(default=None, alias="petId"),
    customer_id: str | None = Query(default=None, alias="customerId"),
    ctx: ApiContext = Depends(read_appointments),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[AppointmentResponse]:
    """List appointments in date order, with optional date range and status filters."""
    stmt = confine(select(Appointment), Appointment, ctx.tenant_id, ctx.location_id)
    if start_date is not None:
        stmt = stmt.where(Appointment.date_time >= start_date)
    if end_date is not None:
        stmt = stmt.where(Appointment.date_time <= end_date)
    if appointment_status is not None:
        stmt = stmt.where(Appointment.status == appointment_status)
    if pet_id:
        stmt = stmt.where(Appointment.pet_id == pet_id)
    if customer_id:
        stmt = stmt.where(Appointment.customer_id == customer_id)
    total = await count(db, stmt)
    rows = (
        await db.execute(
            stmt.order_by(Appointment.date_time).limit(page.limit).offset(page.offset)
        )
    ).scalars().all()
    return ListResponse[AppointmentResponse].build(
        [AppointmentResponse.model_validate(r) for r in rows], total, page.limit, page.offset
    )


@router.get("/{appointment_id}", response_model=DataResponse[AppointmentResponse])
async def get_appointment(
    appointment_id: str,
    ctx: ApiContext = Depends(read_appointments),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[AppointmentResponse]:
    appointment = await get_owned(
        db, Appointment, appointment_id, ctx.tenant_id, ctx.location_id, label="Appointment"
    )
    return DataResponse[AppointmentResponse](data=AppointmentResponse.model_validate(appointment))


@router.post(
    "",
    response_model=DataResponse[AppointmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    body: AppointmentCreate,
    ctx: ApiContext = Depends(write_appointments),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[AppointmentResponse]:
    """Book an appointment for a pet of the key's tenant."""
    location_id = ctx.resolve_location(body.location_id or ctx.location_id)
    pet = await get_owned(db, Pet, body.pet_id, ctx.tenant_id, label="Pet")
    if location_id is None:
        location_id = pet.location_id
    ctx.check_record_location(location_id, pet.location_id, label="Pet")
    if location_id is not None:
        await require_location(db, ctx.tenant_id, location_id)

    appointment = Appointment(
        tenant_id=ctx.tenant_id,
        pet_id=pet.id,
        customer_id=pet.customer_id,
        location_id=location_id,
        date_time=body.date_time,
        duration=body.duration,
        reason=body.reason,
        notes=body.notes,
        status=body.status,
    )
    db.add(appointment)
    await db.flush()
    logger.info("Created appointment %s via API key %s", appointment.id, ctx.api_key.id)
    return DataResponse[AppointmentResponse](data=AppointmentResponse.model_validate(appointment))


@router.put("/{appointment_id}", response_model=DataResponse[AppointmentResponse])
async def update_appointment(
    appointment_id: str,
    body: AppointmentUpdate,
    ctx: ApiContext = Depends(write_appointments),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[AppointmentResponse]:
    """Reschedule or edit an appointment.

    A completed or cancelled appointment only accepts a status change.
    """
    appointment = await get_owned(
        db, Appointment, appointment_id, ctx.tenant_id, ctx.location_id, label="Appointment"
    )
    sent = body.model_fields_set
    if appointment.status in FINAL_STATUSES and body.status is None:
        raise Conflict("Cannot modify a completed or cancelled appointment")

    if "location_id" in sent and body.location_id != appointment.location_id:
        location_id = ctx.resolve_location(body.location_id)
        if location_id is not None:
            location = await require_location(db, ctx.tenant_id, location_id)
            if not location.is_active:
                raise NotFound("Location not found or inactive")
        appointment.location_id = location_id
    if body.date_time is not None:
        appointment.date_time = body.date_time
    if body.duration is not None:
        appointment.duration = body.duration
    if body.reason is not None:
        appointment.reason = body.reason
    if "notes" in sent:
        appointment.notes = body.notes
    if body.status is not None:
        appointment.status = body.status

    await db.flush()
    logger.info(
        "Updated appointment %s fields %s via API key %s",
        appointment.id,
        sorted(sent),
        ctx.api_key.id,
    )
    return DataResponse[AppointmentResponse](data=AppointmentResponse.model_validate(appointment))


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_appointment(
    appointment_id: str,
    ctx: ApiContext = Depends(write_appointments),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Cancel an appointment on behalf of the clinic. The record is kept."""
    appointment = await get_owned(
        db, Appointment, appointment_id, ctx.tenant_id, ctx.location_id, label="Appointment"
    )
    if appointment.status in FINAL_STATUSES:
        raise Conflict("Appointment is already completed or cancelled")

    appointment.status = "CANCELLED_CLINIC"
    await db.flush()
    logger.info("Cancelled appointment %s via API key %s", appointment.id, ctx.api_key.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
