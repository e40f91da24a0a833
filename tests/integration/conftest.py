"""Integration test fixtures with a real database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_recalc.api.app import create_app
from payroll_recalc.database import create_tables
from payroll_recalc.services.state_store import SqlStateStore

# In-memory SQLite shared across connections
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine with tables."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def store(session_factory) -> SqlStateStore:
    return SqlStateStore(session_factory, state_key="test")


@pytest_asyncio.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an app whose lifespan has loaded state from store."""
    app = create_app(store)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest_asyncio.fixture
async def employee_id(client: AsyncClient) -> str:
    """Configure a bi-weekly 2024 schedule and add one $25/h employee."""
    response = await client.put(
        "/api/v1/settings",
        json={
            "tax_year": 2024,
            "company_name": "Acme Corp",
            "pay_frequency": "bi-weekly",
            "first_period_start": "2024-01-01",
            "days_until_payday": 5,
        },
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/v1/employees",
        json={
            "name": "Jane Doe",
            "rate": "25",
            "federal_rate": "12",
            "state_rate": "5",
            "local_rate": "2",
        },
    )
    assert response.status_code == 201
    return response.json()["employee_id"]
