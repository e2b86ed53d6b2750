"""Tests for vetify.schemas.api_key."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from vetify.models.api_key import ApiKey
from vetify.schemas.api_key import (
    ApiKeyCreate,
    ApiKeyCreateResponse,
    ApiKeyResponse,
    ApiKeyUpdate,
)


class TestApiKeyCreate:
    def test_accepts_camel_case(self):
        body = ApiKeyCreate.model_validate(
            {"name": "Web", "scopes": ["read:pets"], "locationId": "loc-1", "rateLimit": 500}
        )
        assert body.location_id == "loc-1"
        assert body.rate_limit == 500

    def test_name_is_stripped(self):
        assert ApiKeyCreate(name="  Web  ", scopes=["read:pets"]).name == "Web"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            ApiKeyCreate(name="   ", scopes=["read:pets"])

    def test_name_longer_than_100_rejected(self):
        with pytest.raises(ValidationError):
            ApiKeyCreate(name="x" * 101, scopes=["read:pets"])

    def test_requires_scopes_or_bundle(self):
        with pytest.raises(ValidationError, match="At least one scope"):
            ApiKeyCreate(name="Web")

    def test_unknown_scope_rejected(self):
        with pytest.raises(ValidationError):
            ApiKeyCreate(name="Web", scopes=["read:secrets"])

    def test_bundle_merges_with_scopes(self):
        body = ApiKeyCreate(name="Web", scopes=["write:pets"], bundle="readonly")
        scopes = body.requested_scopes()
        assert "write:pets" in scopes
        assert "read:locations" in scopes
        assert scopes == sorted(scopes)

    def test_full_bundle(self):
        assert len(ApiKeyCreate(name="Web", bundle="full").requested_scopes()) == 12

    @pytest.mark.parametrize("rate_limit", [100, 1000, 100000])
    def test_rate_limit_in_range(self, rate_limit):
        assert ApiKeyCreate(name="Web", scopes=["read:pets"], rate_limit=rate_limit).rate_limit

    @pytest.mark.parametrize("rate_limit", [0, 99, 100001])
    def test_rate_limit_out_of_range(self, rate_limit):
        with pytest.raises(ValidationError, match="between 100 and 100000"):
            ApiKeyCreate(name="Web", scopes=["read:pets"], rate_limit=rate_limit)


class TestApiKeyUpdate:
    def test_tracks_explicit_nulls(self):
        body = ApiKeyUpdate.model_validate({"locationId": None})
        assert "location_id" in body.model_fields_set
        assert "expires_at" not in body.model_fields_set

    def test_empty_scope_list_rejected(self):
        with pytest.raises(ValidationError):
            ApiKeyUpdate(scopes=[])


class TestApiKeyResponse:
    def _key(self) -> ApiKey:
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        return ApiKey(
            id="key-1",
            tenant_id="tenant-1",
            name="Web",
            key_prefix="vfy_0123abcd",
            key_hash="f" * 64,
            scopes=["read:pets"],
            is_active=True,
            rate_limit=1000,
            created_at=now,
            updated_at=now,
        )

    def test_serialises_camel_case_without_hash(self):
        dumped = ApiKeyResponse.model_validate(self._key()).model_dump(by_alias=True)
        assert dumped["keyPrefix"] == "vfy_0123abcd"
        assert "keyHash" not in dumped
        assert "key_hash" not in dumped
        assert "tenantId" not in dumped

    def test_create_response_adds_full_key(self):
        shown = ApiKeyResponse.model_validate(self._key())
        created = ApiKeyCreateResponse(**shown.model_dump(), full_key="vfy_0123abcd_" + "f" * 32)
        assert created.model_dump(by_alias=True)["fullKey"].startswith("vfy_0123abcd_")
