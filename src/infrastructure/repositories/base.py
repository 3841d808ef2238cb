"""Shared error translation for SQL repositories."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.metrics import record_store_failure
from src.domain.exceptions import StoreUnavailableException

logger = structlog.get_logger(__name__)

# Driver timeouts surface as TimeoutError, which is an OSError.
STORE_ERRORS = (SQLAlchemyError, OSError)


class SqlRepository:
    """Base class holding the session and the error translation helpers."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def _store_call(self, operation: str) -> AsyncGenerator[None, None]:
        """Translate infrastructure errors raised inside the block."""
        try:
            yield
        except STORE_ERRORS as e:
            await self._rollback_quietly(operation)
            raise self._unavailable(operation, e) from e

    def _unavailable(self, operation: str, error: BaseException) -> StoreUnavailableException:
        record_store_failure(operation)
        logger.error(
            "store_unavailable",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )
        return StoreUnavailableException(operation, type(error).__name__)

    async def _rollback_quietly(self, operation: str) -> None:
        """Roll back after a failure; a broken connection is already rolled back server-side."""
        try:
            await self._session.rollback()
        except STORE_ERRORS as e:
            logger.warning(
                "store_rollback_failed",
                operation=operation,
                error=str(e),
            )
