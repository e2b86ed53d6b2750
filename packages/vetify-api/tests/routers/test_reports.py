"""Tests for the /api/v1/reports endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

from vetify.models import InventoryItem, Sale, SaleItem


def _auth(api_key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


def _sale(tenant, location, when: datetime, *lines: tuple[str, float], status="COMPLETED") -> Sale:
    return Sale(
        tenant_id=tenant.id,
        location_id=location.id,
        total=sum(total for _, total in lines),
        status=status,
        created_at=when,
        items=[
            SaleItem(description=category.title(), category=category, total=total)
            for category, total in lines
        ],
    )


@pytest_asyncio.fixture
async def sales(db_session, tenant, location, second_location) -> list[Sale]:
    rows = [
        _sale(
            tenant,
            location,
            datetime(2026, 10, 5, 10, tzinfo=timezone.utc),
            ("MEDICINE", 300.0),
            ("CONSULTATION", 200.0),
        ),
        _sale(
            tenant, location, datetime(2026, 10, 5, 17, tzinfo=timezone.utc), ("MEDICINE", 100.0)
        ),
        _sale(
            tenant, second_location, datetime(2026, 10, 20, 9, tzinfo=timezone.utc), ("FOOD", 250.0)
        ),
        # outside the period and refunded sales never count
        _sale(
            tenant, location, datetime(2026, 9, 30, 23, tzinfo=timezone.utc), ("MEDICINE", 999.0)
        ),
        _sale(
            tenant,
            location,
            datetime(2026, 10, 6, 12, tzinfo=timezone.utc),
            ("MEDICINE", 80.0),
            status="REFUNDED",
        ),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


OCTOBER = {"start_date": "2026-10-01", "end_date": "2026-10-31"}


class TestSalesReport:
    @pytest.mark.asyncio
    async def test_summary_and_daily_breakdown(self, client: AsyncClient, tenant, sales, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get("/api/v1/reports/sales", params=OCTOBER, headers=_auth(full_key))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["summary"]["totalSales"] == 3
        assert data["summary"]["totalRevenue"] == 850.0
        assert data["summary"]["averageOrderValue"] == 283.33
        assert data["breakdown"] == [
            {"date": "2026-10-05", "category": None, "count": 2, "revenue": 600.0},
            {"date": "2026-10-20", "category": None, "count": 1, "revenue": 250.0},
        ]

    @pytest.mark.asyncio
    async def test_end_date_is_inclusive(self, client: AsyncClient, tenant, sales, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get(
            "/api/v1/reports/sales",
            params={"start_date": "2026-10-05", "end_date": "2026-10-05"},
            headers=_auth(full_key),
        )
        assert resp.json()["data"]["summary"]["totalSales"] == 2

    @pytest.mark.asyncio
    async def test_group_by_category_counts_lines(
        self, client: AsyncClient, tenant, sales, issue_key
    ):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get(
            "/api/v1/reports/sales",
            params={**OCTOBER, "groupBy": "category"},
            headers=_auth(full_key),
        )
        breakdown = {
            e["category"]: (e["count"], e["revenue"]) for e in resp.json()["data"]["breakdown"]
        }
        assert breakdown == {
            "CONSULTATION": (1, 200.0),
            "FOOD": (1, 250.0),
            "MEDICINE": (2, 400.0),
        }

    @pytest.mark.asyncio
    async def test_location_scoped_key_sees_only_its_location(
        self, client: AsyncClient, tenant, sales, second_location, issue_key
    ):
        _, full_key = await issue_key(tenant, ["read:reports"], location_id=second_location.id)
        resp = await client.get("/api/v1/reports/sales", params=OCTOBER, headers=_auth(full_key))
        assert resp.json()["data"]["summary"]["totalRevenue"] == 250.0

    @pytest.mark.asyncio
    async def test_empty_period(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get("/api/v1/reports/sales", params=OCTOBER, headers=_auth(full_key))
        data = resp.json()["data"]
        assert data["summary"]["totalSales"] == 0
        assert data["summary"]["averageOrderValue"] == 0.0
        assert data["breakdown"] == []

    @pytest.mark.asyncio
    async def test_missing_start_date_returns_400(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get(
            "/api/v1/reports/sales", params={"end_date": "2026-10-31"}, headers=_auth(full_key)
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
        assert "start_date" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_reversed_dates_return_400(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get(
            "/api/v1/reports/sales",
            params={"start_date": "2026-10-31", "end_date": "2026-10-01"},
            headers=_auth(full_key),
        )
        assert resp.status_code == 400
        assert "before" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_unknown_group_by_returns_400(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get(
            "/api/v1/reports/sales",
            params={**OCTOBER, "groupBy": "hour"},
            headers=_auth(full_key),
        )
        assert resp.status_code == 400
        assert "groupBy" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_wrong_scope_returns_403(self, client: AsyncClient, tenant, issue_key):
        _, full_key = await issue_key(tenant, ["read:inventory"])
        resp = await client.get("/api/v1/reports/sales", params=OCTOBER, headers=_auth(full_key))
        assert resp.status_code == 403


class TestInventoryReport:
    @pytest.mark.asyncio
    async def test_totals_low_stock_and_expiring(
        self, client: AsyncClient, tenant, location, db_session, issue_key
    ):
        soon = datetime.now(timezone.utc) + timedelta(days=10)
        db_session.add_all(
            [
                InventoryItem(
                    tenant_id=tenant.id,
                    location_id=location.id,
                    name="Vacuna Rabia",
                    category="VACCINE",
                    quantity=4,
                    min_stock=5,
                    cost=50,
                    expiration_date=soon,
                ),
                InventoryItem(
                    tenant_id=tenant.id,
                    location_id=location.id,
                    name="Desparasitante",
                    category="DEWORMER",
                    quantity=0,
                    min_stock=2,
                    cost=30,
                ),
                InventoryItem(
                    tenant_id=tenant.id,
                    location_id=location.id,
                    name="Jeringas",
                    category="CONSUMABLE_CLINIC",
                    quantity=100,
                    cost=1.5,
                ),
                InventoryItem(
                    tenant_id=tenant.id,
                    location_id=location.id,
                    name="Producto retirado",
                    category="VACCINE",
                    quantity=10,
                    cost=99,
                    status="DISCONTINUED",
                ),
            ]
        )
        await db_session.commit()

        _, full_key = await issue_key(tenant, ["read:reports"])
        resp = await client.get("/api/v1/reports/inventory", headers=_auth(full_key))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["summary"] == {
            "totalItems": 3,
            "totalValue": 350.0,
            "lowStockCount": 1,
            "outOfStockCount": 1,
            "expiringSoonCount": 1,
        }
        assert [i["name"] for i in data["lowStockItems"]] == ["Vacuna Rabia"]
        assert [i["name"] for i in data["expiringItems"]] == ["Vacuna Rabia"]
        assert [c["category"] for c in data["byCategory"]] == [
            "CONSUMABLE_CLINIC",
            "DEWORMER",
            "VACCINE",
        ]

        filtered = await client.get(
            "/api/v1/reports/inventory", params={"category": "DEWORMER"}, headers=_auth(full_key)
        )
        assert filtered.json()["data"]["summary"]["totalItems"] == 1
        assert filtered.json()["data"]["summary"]["totalValue"] == 0.0
