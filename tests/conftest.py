"""
Shared fixtures.

Provides:
- In-memory SQLite database with the ledger tables
- Repositories and services wired to it
- In-memory cache client
- Account seeding helper
"""

from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.application.services import (
    AccountService,
    BatchIngestionService,
    TransactionEngine,
)
from src.domain.entities import Account
from src.infrastructure.database import Base
from src.infrastructure.repositories import SqlAccountRepository, SqlLedgerStore
from tests.fakes import InMemoryCacheClient


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Repository and Service Fixtures
# =============================================================================

@pytest.fixture
def account_repository(test_session: AsyncSession) -> SqlAccountRepository:
    return SqlAccountRepository(test_session)


@pytest.fixture
def ledger_store(test_session: AsyncSession) -> SqlLedgerStore:
    return SqlLedgerStore(test_session)


@pytest.fixture
def cache() -> InMemoryCacheClient:
    """Create an in-memory cache client."""
    return InMemoryCacheClient()


@pytest.fixture
def engine(
    account_repository: SqlAccountRepository,
    ledger_store: SqlLedgerStore,
    cache: InMemoryCacheClient,
) -> TransactionEngine:
    return TransactionEngine(
        account_repository=account_repository,
        ledger_store=ledger_store,
        cache=cache,
        cache_ttl_seconds=60,
    )


@pytest.fixture
def ingestion(engine: TransactionEngine, ledger_store: SqlLedgerStore) -> BatchIngestionService:
    return BatchIngestionService(
        transaction_engine=engine,
        ledger_store=ledger_store,
        max_rows=100,
    )


@pytest.fixture
def account_service(
    account_repository: SqlAccountRepository,
    cache: InMemoryCacheClient,
) -> AccountService:
    return AccountService(
        account_repository=account_repository,
        cache=cache,
        cache_ttl_seconds=60,
    )


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def seed_account(
    account_repository: SqlAccountRepository,
) -> Callable[..., Awaitable[Account]]:
    """Open an account directly through the repository."""

    async def _seed(account_number: int, money="100", investor_id: str = "inv-1") -> Account:
        account = Account(
            account_number=account_number,
            money=Decimal(str(money)),
            investor_id=investor_id,
        )
        return await account_repository.save(account)

    return _seed


@pytest.fixture
def balance_of(account_repository: SqlAccountRepository) -> Callable[[int], Awaitable[Decimal]]:
    """Read the stored balance of an account."""

    async def _balance(account_number: int) -> Decimal:
        account = await account_repository.get_by_number(account_number)
        assert account is not None
        return account.money

    return _balance
