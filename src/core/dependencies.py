"""Dependency injection for FastAPI.

The application lifespan owns the database and cache handles and keeps
them on ``app.state``; everything below is built per request from those
handles, so tests can swap any piece through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.domain.interfaces import AccountRepository, CacheClient, LedgerStore
from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import SqlAccountRepository, SqlLedgerStore
from src.application.services import (
    AccountService,
    BatchIngestionService,
    TransactionEngine,
)


# Repository dependencies
async def get_account_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AccountRepository:
    """Get an AccountRepository instance."""
    return SqlAccountRepository(session)


async def get_ledger_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> LedgerStore:
    """Get a LedgerStore instance sharing the request session."""
    return SqlLedgerStore(session)


# Cache dependency
def get_cache_client(request: Request) -> CacheClient:
    """Get the application's CacheClient."""
    return request.app.state.cache


# Service dependencies
async def get_transaction_engine(
    account_repo: Annotated[AccountRepository, Depends(get_account_repository)],
    ledger_store: Annotated[LedgerStore, Depends(get_ledger_store)],
    cache: Annotated[CacheClient, Depends(get_cache_client)],
) -> TransactionEngine:
    """Get a TransactionEngine instance with all dependencies."""
    return TransactionEngine(
        account_repository=account_repo,
        ledger_store=ledger_store,
        cache=cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )


async def get_batch_ingestion_service(
    engine: Annotated[TransactionEngine, Depends(get_transaction_engine)],
    ledger_store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> BatchIngestionService:
    """Get a BatchIngestionService driving the request's engine."""
    return BatchIngestionService(
        transaction_engine=engine,
        ledger_store=ledger_store,
        max_rows=settings.bulk_max_rows,
    )


async def get_account_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repository)],
    cache: Annotated[CacheClient, Depends(get_cache_client)],
) -> AccountService:
    """Get an AccountService instance."""
    return AccountService(
        account_repository=account_repo,
        cache=cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
