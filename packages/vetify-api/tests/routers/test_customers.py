"""Tests for the /api/v1/customers endpoints."""

import pytest
from httpx import AsyncClient


def _auth(api_key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


class TestCustomers:
    @pytest.mark.asyncio
    async def test_list_and_search(self, client: AsyncClient, tenant, customer, issue_key):
        _, full_key = await issue_key(tenant, ["read:customers"])
        everyone = await client.get("/api/v1/customers", headers=_auth(full_key))
        assert [c["id"] for c in everyone.json()["data"]] == [customer.id]

        hit = await client.get(
            "/api/v1/customers", params={"search": "ana@"}, headers=_auth(full_key)
        )
        miss = await client.get(
            "/api/v1/customers", params={"search": "nobody"}, headers=_auth(full_key)
        )
        assert hit.json()["meta"]["total"] == 1
        assert miss.json()["meta"]["total"] == 0

    @pytest.mark.asyncio
    async def test_get_customer_fields_are_camel_case(
        self, client: AsyncClient, tenant, customer, issue_key
    ):
        _, full_key = await issue_key(tenant, ["read:customers"])
        resp = await client.get(f"/api/v1/customers/{customer.id}", headers=_auth(full_key))
        data = resp.json()["data"]
        assert data["locationId"] == customer.location_id
        assert data["isActive"] is True
        assert "createdAt" in data
        assert "tenantId" not in data

    @pytest.mark.asyncio
    async def test_customer_of_other_tenant_returns_404(
        self, client: AsyncClient, other_tenant, customer, issue_key
    ):
        _, full_key = await issue_key(other_tenant, ["read:customers"])
        resp = await client.get(f"/api/v1/customers/{customer.id}", headers=_auth(full_key))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_create_defaults_to_key_location(
        self, client: AsyncClient, tenant, location, issue_key
    ):
        _, full_key = await issue_key(tenant, ["write:customers"], location_id=location.id)
        resp = await client.post(
            "/api/v1/customers",
            json={"name": "Luis Perez", "phone": "5550001111"},
            headers=_auth(full_key),
        )
        assert resp.status_code == 201
        assert resp.json()["data"]["locationId"] == location.id

    @pytest.mark.asyncio
    async def test_create_with_foreign_location_returns_404(
        self, client: AsyncClient, tenant, other_location, issue_key
    ):
        _, full_key = await issue_key(tenant, ["write:customers"])
        resp = await client.post(
            "/api/v1/customers",
            json={"name": "Luis Perez", "locationId": other_location.id},
            headers=_auth(full_key),
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_write_scope_does_not_grant_read(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["write:customers"])
        resp = await client.get("/api/v1/customers", headers=_auth(full_key))
        assert resp.status_code == 403
