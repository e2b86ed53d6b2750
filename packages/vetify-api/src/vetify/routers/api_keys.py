"""Tenant-admin API key management endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.config import Settings
from vetify.dependencies import (
    AdminContext,
    Pagination,
    get_admin_context,
    get_app_settings,
    get_db,
    get_pagination,
)
from vetify.errors import NotFound, ScopeFailure, ScopeFailureReason, ValidationFailure
from vetify.models.api_key import ApiKey
from vetify.models.location import Location
from vetify.schemas.api_key import (
    ApiKeyCreate,
    ApiKeyCreateResponse,
    ApiKeyResponse,
    ApiKeyUpdate,
)
from vetify.schemas.common import DataResponse, ListResponse
from vetify.services.api_keys import create_api_key, regenerate_api_key
from vetify.services.authentication import as_utc
from vetify.services.scopes import normalize_scopes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings/api-keys", tags=["api-keys"])


async def _get_tenant_key(db: AsyncSession, tenant_id: str, key_id: str) -> ApiKey:
    stmt = select(ApiKey).where(ApiKey.id == key_id).where(ApiKey.tenant_id == tenant_id)
    api_key = (await db.execute(stmt)).scalar_one_or_none()
    if api_key is None:
        raise NotFound("API key not found")
    return api_key


async def _check_location(db: AsyncSession, tenant_id: str, location_id: str) -> None:
    stmt = (
        select(Location.id)
        .where(Location.id == location_id)
        .where(Location.tenant_id == tenant_id)
    )
    if (await db.execute(stmt)).scalar_one_or_none() is None:
        raise NotFound("Location not found")


def _check_expiry(expires_at: datetime | None) -> datetime | None:
    if expires_at is None:
        return None
    expires_at = as_utc(expires_at)
    if expires_at <= datetime.now(timezone.utc):
        raise ValidationFailure("Expiration date must be in the future")
    return expires_at


def _with_full_key(api_key: ApiKey, full_key: str) -> ApiKeyCreateResponse:
    shown = ApiKeyResponse.model_validate(api_key)
    return ApiKeyCreateResponse(**shown.model_dump(), full_key=full_key)


@router.get("", response_model=ListResponse[ApiKeyResponse])
async def list_api_keys(
    admin: AdminContext = Depends(get_admin_context),
    page: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ListResponse[ApiKeyResponse]:
    """List the tenant's API keys, newest first."""
    base = select(ApiKey).where(ApiKey.tenant_id == admin.tenant_id)
    total = await db.scalar(select(func.count()).select_from(base.subquery()))
    stmt = base.order_by(ApiKey.created_at.desc()).limit(page.limit).offset(page.offset)
    keys = (await db.execute(stmt)).scalars().all()
    return ListResponse[ApiKeyResponse].build(
        [ApiKeyResponse.model_validate(k) for k in keys], total or 0, page.limit, page.offset
    )


@router.post(
    "",
    response_model=DataResponse[ApiKeyCreateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_key(
    body: ApiKeyCreate,
    admin: AdminContext = Depends(get_admin_context),
    settings: Settings = Depends(get_app_settings),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[ApiKeyCreateResponse]:
    """Create an API key. The plaintext key is returned only in this response."""
    if admin.tenant.plan_type.upper() not in settings.api_access_plan_set:
        raise ScopeFailure(
            ScopeFailureReason.PLAN_NOT_ALLOWED,
            "API access is not included in your current plan",
        )
    if body.location_id is not None:
        await _check_location(db, admin.tenant_id, body.location_id)

    api_key, full_key = await create_api_key(
        db,
        admin.tenant_id,
        body.name,
        body.requested_scopes(),
        location_id=body.location_id,
        expires_at=_check_expiry(body.expires_at),
        rate_limit=body.rate_limit,
        created_by_id=admin.session.staff_id,
    )
    return DataResponse[ApiKeyCreateResponse](data=_with_full_key(api_key, full_key))


@router.get("/{key_id}", response_model=DataResponse[ApiKeyResponse])
async def get_key(
    key_id: str,
    admin: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[ApiKeyResponse]:
    api_key = await _get_tenant_key(db, admin.tenant_id, key_id)
    return DataResponse[ApiKeyResponse](data=ApiKeyResponse.model_validate(api_key))


@router.patch("/{key_id}", response_model=DataResponse[ApiKeyResponse])
async def update_key(
    key_id: str,
    body: ApiKeyUpdate,
    admin: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[ApiKeyResponse]:
    """Update name, scopes, location, status, expiry or rate limit."""
    api_key = await _get_tenant_key(db, admin.tenant_id, key_id)
    sent = body.model_fields_set

    if body.name is not None:
        if not body.name.strip():
            raise ValidationFailure("Name must not be blank")
        api_key.name = body.name.strip()
    if body.scopes is not None:
        api_key.scopes = normalize_scopes(s.value for s in body.scopes)
    if "location_id" in sent:
        if body.location_id is not None:
            await _check_location(db, admin.tenant_id, body.location_id)
        api_key.location_id = body.location_id
    if body.is_active is not None:
        api_key.is_active = body.is_active
    if "expires_at" in sent:
        api_key.expires_at = _check_expiry(body.expires_at)
    if body.rate_limit is not None:
        api_key.rate_limit = body.rate_limit

    await db.flush()
    logger.info("Updated API key %s fields %s", api_key.id, sorted(sent))
    return DataResponse[ApiKeyResponse](data=ApiKeyResponse.model_validate(api_key))


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_key(
    key_id: str,
    admin: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Permanently delete an API key. Deactivate instead to keep its history."""
    api_key = await _get_tenant_key(db, admin.tenant_id, key_id)
    await db.delete(api_key)
    await db.flush()
    logger.info("Deleted API key %s (%s)", key_id, api_key.key_prefix)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{key_id}/regenerate", response_model=DataResponse[ApiKeyCreateResponse])
async def regenerate_key(
    key_id: str,
    admin: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[ApiKeyCreateResponse]:
    """Issue a new secret for an existing key. The old one stops working at once."""
    api_key = await _get_tenant_key(db, admin.tenant_id, key_id)
    full_key = await regenerate_api_key(db, api_key)
    return DataResponse[ApiKeyCreateResponse](data=_with_full_key(api_key, full_key))
