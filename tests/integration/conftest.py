"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app, backed by the in-memory database
- Client variants with a failing cache and a failing datastore
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.main import app
from src.core.dependencies import (
    get_account_repository,
    get_cache_client,
    get_ledger_store,
)
from src.infrastructure.repositories import SqlAccountRepository, SqlLedgerStore
from tests.fakes import InMemoryCacheClient


def _override(session, cache) -> None:
    async def override_get_account_repository():
        return SqlAccountRepository(session)

    async def override_get_ledger_store():
        return SqlLedgerStore(session)

    def override_get_cache_client():
        return cache

    app.dependency_overrides[get_account_repository] = override_get_account_repository
    app.dependency_overrides[get_ledger_store] = override_get_ledger_store
    app.dependency_overrides[get_cache_client] = override_get_cache_client


def failing_session() -> MagicMock:
    """A session whose every statement fails like a dropped connection."""
    session = MagicMock(spec=AsyncSession)
    session.execute = AsyncMock(
        side_effect=OperationalError("SELECT 1", {}, ConnectionError("connection refused"))
    )
    session.flush = AsyncMock(
        side_effect=OperationalError("INSERT", {}, ConnectionError("connection refused"))
    )
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    cache: InMemoryCacheClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Uses an in-memory cache
    """
    _override(test_session, cache)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_cache(
    test_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose cache drops every call."""
    _override(test_session, InMemoryCacheClient(fail_mode=True))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_store(
    cache: InMemoryCacheClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose datastore is unreachable."""
    _override(failing_session(), cache)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def funded_account(client: AsyncClient) -> dict:
    """Open account 1 with a balance of 100 through the API."""
    response = await client.post("/account/new-account", json={
        "accountNumber": 1,
        "money": 100,
        "investor": "inv-1",
    })
    assert response.status_code == 201
    return response.json()["account"]
