"""Tenant and location confinement for queries issued on behalf of API keys."""

from typing import TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.errors import NotFound
from vetify.models.location import Location

M = TypeVar("M")


def confine(stmt: Select, model, tenant_id: str, location_id: str | None) -> Select:
    """Restrict ``stmt`` to one tenant and, when given, one location."""
    stmt = stmt.where(model.tenant_id == tenant_id)
    if location_id is not None:
        column = model.id if model is Location else model.location_id
        stmt = stmt.where(column == location_id)
    return stmt


async def count(db: AsyncSession, stmt: Select) -> int:
    return await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0


async def get_owned(
    db: AsyncSession,
    model: type[M],
    object_id: str,
    tenant_id: str,
    location_id: str | None = None,
    *,
    label: str,
) -> M:
    """Load one row the caller may see, or raise ``NotFound``.

    Rows of another tenant, or of another location for a location-bound key,
    are reported exactly like rows that do not exist.
    """
    stmt = confine(select(model).where(model.id == object_id), model, tenant_id, location_id)
    row = (await db.execute(stmt)).scalar_one_or_none()
    if row is None:
        raise NotFound(f"{label} not found")
    return row


async def require_location(db: AsyncSession, tenant_id: str, location_id: str) -> Location:
    return await get_owned(db, Location, location_id, tenant_id, label="Location")
