"""Transaction engine - applies, reverses and reads ledger transactions."""

import time
from typing import Tuple
from uuid import UUID

import structlog

from src.core.config import settings
from src.core.metrics import record_reversal, record_transaction, track_transaction_latency
from src.domain.entities import Transaction
from src.domain.exceptions import (
    AccountNotFoundException,
    DomainException,
    DuplicateTransactionException,
    InsufficientFundsException,
    PartialApplyFailureException,
    TransactionAlreadyReversedException,
    TransactionNotFoundException,
)
from src.domain.interfaces import (
    AccountRepository,
    CacheClient,
    LedgerStore,
    account_cache_key,
    transaction_cache_key,
)
from src.application.dto import TransactionRequest

logger = structlog.get_logger(__name__)


class TransactionEngine:
    """
    Application service for the transaction use cases.

    Validation and business rules are checked before any write. The store
    re-checks uniqueness and funds at write time, so the checks here are the
    fast path and the store is the final arbiter.
    """

    REVERSAL_KEY_PREFIX = "reverse"

    def __init__(
        self,
        account_repository: AccountRepository,
        ledger_store: LedgerStore,
        cache: CacheClient,
        cache_ttl_seconds: int | None = None,
    ):
        self._account_repo = account_repository
        self._ledger = ledger_store
        self._cache = cache
        self._cache_ttl = cache_ttl_seconds or settings.cache_ttl_seconds

    async def apply_transaction(self, request: TransactionRequest) -> Transaction:
        """
        Validate and apply a credit or debit.

        Args:
            request: Raw transaction request

        Returns:
            The persisted transaction

        Raises:
            ValidationException: If the request is missing or malformed fields
            DuplicateTransactionException: If the idempotency key was already applied
            AccountNotFoundException: If the account does not exist
            InsufficientFundsException: If a debit would overdraw the account
            StoreUnavailableException: If the store failed before committing
            PartialApplyFailureException: If the commit outcome is unknown
        """
        transaction = request.to_entity()
        return await self._apply(transaction)

    async def reverse_transaction(self, transaction_id: str) -> Transaction:
        """
        Reverse a transaction by applying a new one of the inverse type.

        A transaction can be reversed at most once. The reversal goes
        through the same checks as any other transaction, so reversing a
        credit can fail for insufficient funds.

        Raises:
            TransactionNotFoundException: If the original does not exist
            TransactionAlreadyReversedException: If it was already reversed
            InsufficientFundsException: If the reversing debit would overdraw
        """
        original = await self._find(transaction_id)
        log = logger.bind(
            original_id=str(original.id),
            account_number=original.account_number,
        )

        existing = await self._ledger.get_reversal_of(original.id)
        if existing is not None:
            log.warning("reversal_rejected_already_reversed", reversal_id=str(existing.id))
            record_reversal("already_reversed")
            raise TransactionAlreadyReversedException(str(original.id), existing)

        reversal = Transaction(
            idempotency_key=self._reversal_key(original),
            account_number=original.account_number,
            amount=original.amount,
            type=original.type.inverse,
            reversal_of=original.id,
        )

        try:
            await self._apply(reversal)
        except DomainException as e:
            record_reversal(e.code)
            raise

        await self._cache.delete(transaction_cache_key(original.id))
        record_reversal("applied")
        log.info("transaction_reversed", reversal_id=str(reversal.id))

        return reversal

    async def get_transaction(self, transaction_id: str) -> Tuple[Transaction, bool]:
        """
        Read a transaction through the cache.

        Returns:
            The transaction and whether it was served from the cache

        Raises:
            TransactionNotFoundException: If the transaction does not exist
        """
        parsed_id = self._parse_id(transaction_id)
        key = transaction_cache_key(parsed_id)
        cached = await self._cache.get(key)
        if cached is not None:
            try:
                return Transaction.from_dict(cached), True
            except (KeyError, ValueError, TypeError):
                logger.warning("cache_snapshot_invalid", key=key)
                await self._cache.delete(key)

        transaction = await self._find(transaction_id)
        await self._cache.set(key, transaction.to_dict(), self._cache_ttl)
        return transaction, False

    async def _apply(self, transaction: Transaction) -> Transaction:
        log = logger.bind(
            transaction_id=str(transaction.id),
            idempotency_key=transaction.idempotency_key,
            account_number=transaction.account_number,
            amount=str(transaction.amount),
            type=transaction.type.value,
        )
        log.info("transaction_requested")

        try:
            with track_transaction_latency():
                account = await self._check_and_apply(transaction)
        except PartialApplyFailureException as e:
            # The commit may have landed, so cached state can no longer be trusted.
            await self._invalidate(transaction)
            record_transaction(transaction.type.value, e.code)
            raise
        except DomainException as e:
            record_transaction(transaction.type.value, e.code)
            log.warning("transaction_rejected", code=e.code, reason=e.message)
            raise

        await self._invalidate(transaction)

        record_transaction(transaction.type.value, "applied")
        log.info(
            "transaction_applied",
            new_balance=str(account.money) if account is not None else None,
        )

        return transaction

    async def _invalidate(self, transaction: Transaction) -> None:
        await self._cache.delete(
            account_cache_key(transaction.account_number),
            transaction_cache_key(transaction.id),
        )

    async def _check_and_apply(self, transaction: Transaction):
        existing = await self._ledger.get_transaction_by_idempotency_key(
            transaction.idempotency_key
        )
        if existing is not None:
            raise DuplicateTransactionException(existing)

        account = await self._account_repo.get_by_number(transaction.account_number)
        if account is None:
            raise AccountNotFoundException(transaction.account_number)

        if transaction.is_debit and not account.can_cover(transaction.amount):
            raise InsufficientFundsException(
                account.account_number,
                account.money,
                transaction.amount,
            )

        return await self._ledger.apply_transaction(transaction)

    async def _find(self, transaction_id: str) -> Transaction:
        transaction = await self._ledger.get_transaction_by_id(self._parse_id(transaction_id))
        if transaction is None:
            raise TransactionNotFoundException(str(transaction_id))
        return transaction

    @staticmethod
    def _parse_id(transaction_id: str) -> UUID:
        try:
            return UUID(str(transaction_id).strip())
        except ValueError:
            raise TransactionNotFoundException(str(transaction_id))

    def _reversal_key(self, original: Transaction) -> str:
        # Nanosecond clock keeps repeated attempts distinct.
        return f"{self.REVERSAL_KEY_PREFIX}_{original.idempotency_key}_{time.time_ns()}"
