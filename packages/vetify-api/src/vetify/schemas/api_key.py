"""Schemas for the tenant-admin API key management endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from vetify.config import get_settings
from vetify.schemas.common import CamelModel
from vetify.services.scopes import SCOPE_BUNDLES, ApiScope


def _check_rate_limit(value: int | None) -> int | None:
    if value is None:
        return value
    settings = get_settings()
    low, high = settings.api_key_min_rate_limit, settings.api_key_max_rate_limit
    if not low <= value <= high:
        raise ValueError(f"Rate limit must be between {low} and {high} requests per hour")
    return value


class ApiKeyCreate(CamelModel):
    """Request body for creating an API key.

    Scopes come either as an explicit list or as a named bundle; when both are
    given they are merged.
    """

    name: str = Field(min_length=1, max_length=100)
    scopes: list[ApiScope] = Field(default_factory=list)
    bundle: Literal["readonly", "full"] | None = None
    location_id: str | None = None
    expires_at: datetime | None = None
    rate_limit: int | None = None

    @field_validator("rate_limit")
    @classmethod
    def validate_rate_limit(cls, v: int | None) -> int | None:
        return _check_rate_limit(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v

    @model_validator(mode="after")
    def require_scopes(self) -> "ApiKeyCreate":
        if not self.scopes and self.bundle is None:
            raise ValueError("At least one scope is required")
        return self

    def requested_scopes(self) -> list[str]:
        scopes = {s.value for s in self.scopes}
        if self.bundle is not None:
            scopes.update(SCOPE_BUNDLES[self.bundle])
        return sorted(scopes)


class ApiKeyUpdate(CamelModel):
    """Request body for updating an API key. Omitted fields stay unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    scopes: list[ApiScope] | None = Field(default=None, min_length=1)
    location_id: str | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None
    rate_limit: int | None = None

    @field_validator("rate_limit")
    @classmethod
    def validate_rate_limit(cls, v: int | None) -> int | None:
        return _check_rate_limit(v)


class ApiKeyResponse(CamelModel):
    """An API key as shown to administrators. The hash is never exposed."""

    id: str
    name: str
    key_prefix: str
    scopes: list[str]
    location_id: str | None
    is_active: bool
    expires_at: datetime | None
    rate_limit: int
    last_used: datetime | None
    created_by_id: str | None
    created_at: datetime
    updated_at: datetime


class ApiKeyCreateResponse(ApiKeyResponse):
    """Returned by create and regenerate: the only time ``fullKey`` is shown."""

    full_key: str
