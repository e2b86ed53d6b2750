"""Test fixtures and configuration."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vetify.config import Settings
from vetify.dependencies import (
    get_app_settings,
    get_db,
    get_rate_limiter,
    get_usage_recorder,
)
from vetify.main import create_app
from vetify.models import ApiKey, Base, Customer, Location, Pet, Tenant
from vetify.services.admin_session import issue_admin_token
from vetify.services.api_keys import create_api_key
from vetify.services.rate_limit import SlidingWindowRateLimiter
from vetify.services.usage import UsageRecorder

IssueKey = Callable[..., Awaitable[tuple[ApiKey, str]]]


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis_server() -> FakeServer:
    """Backing store for ``fake_redis``. Set ``connected = False`` to simulate an outage."""
    return FakeServer()


@pytest_asyncio.fixture
async def fake_redis(redis_server) -> AsyncGenerator[FakeAsyncRedis, None]:
    """Lua-capable in-process Redis with its own keyspace per test."""
    redis = FakeAsyncRedis(server=redis_server, decode_responses=True)
    yield redis
    await redis.aclose()


@pytest.fixture
def rate_limiter(fake_redis) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(fake_redis)


@pytest.fixture
def settings() -> Settings:
    """Settings handed to the app. Tests may flip fields before making requests."""
    return Settings(environment="test", api_secret_key="test-secret-key-0123456789")


@pytest_asyncio.fixture
async def client(
    session_factory, settings, rate_limiter
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with overridden DB, Redis and settings."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_usage_recorder] = lambda: UsageRecorder(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Clinica Norte", slug="clinica-norte", plan_type="CORPORATIVO")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Clinica Sur", slug="clinica-sur", plan_type="CORPORATIVO")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


async def _add_location(db: AsyncSession, tenant: Tenant, slug: str, primary: bool) -> Location:
    location = Location(
        tenant_id=tenant.id, name=slug.replace("-", " ").title(), slug=slug, is_primary=primary
    )
    db.add(location)
    await db.commit()
    return location


@pytest_asyncio.fixture
async def location(db_session: AsyncSession, tenant: Tenant) -> Location:
    return await _add_location(db_session, tenant, "sucursal-centro", True)


@pytest_asyncio.fixture
async def second_location(db_session: AsyncSession, tenant: Tenant) -> Location:
    return await _add_location(db_session, tenant, "sucursal-oriente", False)


@pytest_asyncio.fixture
async def other_location(db_session: AsyncSession, other_tenant: Tenant) -> Location:
    return await _add_location(db_session, other_tenant, "sucursal-sur", True)


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession, tenant: Tenant, location: Location) -> Customer:
    customer = Customer(
        tenant_id=tenant.id,
        location_id=location.id,
        name="Ana Torres",
        email="ana@example.com",
        phone="5551234567",
    )
    db_session.add(customer)
    await db_session.commit()
    return customer


@pytest_asyncio.fixture
async def pet(db_session: AsyncSession, customer: Customer) -> Pet:
    pet = Pet(
        tenant_id=customer.tenant_id,
        customer_id=customer.id,
        location_id=customer.location_id,
        name="Firulais",
        species="dog",
        breed="Mestizo",
        date_of_birth=datetime(2020, 5, 1, tzinfo=timezone.utc),
        gender="male",
    )
    db_session.add(pet)
    await db_session.commit()
    return pet


@pytest.fixture
def issue_key(db_session: AsyncSession) -> IssueKey:
    """Factory creating committed API keys: ``await issue_key(tenant, [scopes], **kw)``."""

    async def _issue(tenant: Tenant, scopes: list[str], **kwargs) -> tuple[ApiKey, str]:
        kwargs.setdefault("name", "Test key")
        api_key, full_key = await create_api_key(db_session, tenant.id, scopes=scopes, **kwargs)
        await db_session.commit()
        return api_key, full_key

    return _issue


@pytest.fixture
def admin_headers(settings: Settings, tenant: Tenant) -> dict[str, str]:
    token = issue_admin_token(settings.api_secret_key, tenant.id, "staff-1")
    return {"Authorization": f"Bearer {token}"}
