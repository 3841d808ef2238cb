"""SQL implementation of LedgerStore."""

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from src.core.metrics import record_partial_apply_failure
from src.domain.entities import Account, Transaction, TransactionType
from src.domain.exceptions import (
    AccountNotFoundException,
    DomainException,
    DuplicateTransactionException,
    InsufficientFundsException,
    PartialApplyFailureException,
    StoreUnavailableException,
    TransactionAlreadyReversedException,
)
from src.domain.interfaces import LedgerStore
from src.infrastructure.database.models import AccountModel, TransactionModel

from .account_repository import to_account
from .base import STORE_ERRORS, SqlRepository

logger = structlog.get_logger(__name__)


class SqlLedgerStore(SqlRepository, LedgerStore):
    """
    SQL-backed ledger store.

    A transaction insert and its balance change are flushed in the same
    database transaction and committed together. The balance change is a
    conditional UPDATE, so the funds check is re-evaluated by the database
    at write time.
    """

    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        stmt = select(TransactionModel).where(TransactionModel.id == str(transaction_id))
        return await self._fetch_one(stmt, "get_transaction")

    async def get_transaction_by_idempotency_key(
        self,
        idempotency_key: str,
    ) -> Optional[Transaction]:
        stmt = select(TransactionModel).where(
            TransactionModel.idempotency_key == idempotency_key
        )
        return await self._fetch_one(stmt, "get_transaction_by_key")

    async def get_reversal_of(self, transaction_id: UUID) -> Optional[Transaction]:
        stmt = select(TransactionModel).where(
            TransactionModel.reversal_of == str(transaction_id)
        )
        return await self._fetch_one(stmt, "get_reversal")

    async def apply_transaction(self, transaction: Transaction) -> Optional[Account]:
        log = logger.bind(
            transaction_id=str(transaction.id),
            idempotency_key=transaction.idempotency_key,
            account_number=transaction.account_number,
        )

        try:
            self._session.add(self._to_model(transaction))
            await self._session.flush()
        except IntegrityError as e:
            await self._rollback_quietly("apply_transaction")
            raise await self._conflict_for(transaction, e)
        except STORE_ERRORS as e:
            await self._rollback_quietly("apply_transaction")
            raise self._unavailable("apply_transaction", e) from e

        stmt = (
            update(AccountModel)
            .where(AccountModel.account_number == transaction.account_number)
            .values(money=AccountModel.money + transaction.signed_amount)
            .execution_options(synchronize_session=False)
        )
        if transaction.type == TransactionType.DEBIT:
            stmt = stmt.where(AccountModel.money >= transaction.amount)

        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            await self._rollback_quietly("apply_transaction")
            raise self._unavailable("apply_transaction", e) from e

        if result.rowcount != 1:
            # Nothing committed yet: dropping the insert keeps the pair atomic.
            await self._rollback_quietly("apply_transaction")
            raise await self._rejected_update(transaction)

        try:
            await self._session.commit()
        except STORE_ERRORS as e:
            record_partial_apply_failure()
            log.critical(
                "partial_apply_failure",
                error=str(e),
                error_type=type(e).__name__,
                amount=str(transaction.amount),
                type=transaction.type.value,
            )
            await self._rollback_quietly("apply_transaction")
            raise PartialApplyFailureException(
                transaction, f"commit failed: {type(e).__name__}"
            ) from e

        # Committed: from here on a failed read must not fail the apply.
        try:
            account = await self._get_account(transaction.account_number)
        except StoreUnavailableException as e:
            log.warning("committed_balance_unreadable", error=e.message)
            return None

        if account is None:
            log.warning("committed_account_missing")
            return None

        log.debug("transaction_committed", new_balance=str(account.money))
        return account

    async def _conflict_for(
        self,
        transaction: Transaction,
        error: IntegrityError,
    ) -> DomainException:
        """Work out which unique constraint rejected the insert."""
        existing = await self.get_transaction_by_idempotency_key(transaction.idempotency_key)
        if existing is not None:
            return DuplicateTransactionException(existing)

        if transaction.reversal_of is not None:
            reversal = await self.get_reversal_of(transaction.reversal_of)
            if reversal is not None:
                return TransactionAlreadyReversedException(
                    str(transaction.reversal_of), reversal
                )

        return self._unavailable("apply_transaction", error)

    async def _rejected_update(self, transaction: Transaction) -> DomainException:
        """Re-derive why the conditional balance update matched no row."""
        account = await self._get_account(transaction.account_number)
        if account is None:
            return AccountNotFoundException(transaction.account_number)

        logger.warning(
            "conditional_debit_rejected",
            account_number=transaction.account_number,
            balance=str(account.money),
            amount=str(transaction.amount),
        )
        return InsufficientFundsException(
            transaction.account_number,
            account.money,
            transaction.amount,
        )

    async def _get_account(self, account_number: int) -> Optional[Account]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.account_number == account_number)
            .execution_options(populate_existing=True)
        )
        async with self._store_call("get_account"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return to_account(model) if model is not None else None

    async def _fetch_one(self, stmt, operation: str) -> Optional[Transaction]:
        async with self._store_call(operation):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    def _to_model(self, transaction: Transaction) -> TransactionModel:
        return TransactionModel(
            id=str(transaction.id),
            idempotency_key=transaction.idempotency_key,
            account_number=transaction.account_number,
            amount=transaction.amount,
            type=transaction.type.value,
            date=transaction.date,
            reversal_of=str(transaction.reversal_of) if transaction.reversal_of else None,
        )

    def _to_entity(self, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity."""
        return Transaction(
            id=UUID(str(model.id)),
            idempotency_key=model.idempotency_key,
            account_number=model.account_number,
            amount=model.amount,
            type=TransactionType(model.type),
            date=model.date,
            reversal_of=UUID(str(model.reversal_of)) if model.reversal_of else None,
        )
