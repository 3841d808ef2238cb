"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Account, Transaction


class AccountRepository(ABC):
    """
    Abstract repository for Account persistence.

    Balances are never written through this repository; they change only
    through ``LedgerStore.apply_transaction``.
    """

    @abstractmethod
    async def get_by_number(self, account_number: int) -> Optional[Account]:
        """
        Retrieve an account by its account number.

        Args:
            account_number: The externally assigned account number

        Returns:
            The account if found, None otherwise

        Raises:
            StoreUnavailableException: If the store cannot be reached
        """
        ...

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """
        Persist a newly opened account.

        Raises:
            AccountAlreadyExistsException: If the account number is taken
            StoreUnavailableException: If the store cannot be reached
        """
        ...

    @abstractmethod
    async def delete_by_number(self, account_number: int) -> bool:
        """
        Delete an account.

        Returns:
            True if an account was deleted, False if none matched
        """
        ...


class LedgerStore(ABC):
    """
    Durable storage for transactions and the balance changes they cause.

    The store enforces idempotency-key uniqueness itself; callers' lookups
    are only a fast path.
    """

    @abstractmethod
    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        ...

    @abstractmethod
    async def get_transaction_by_idempotency_key(
        self,
        idempotency_key: str,
    ) -> Optional[Transaction]:
        ...

    @abstractmethod
    async def get_reversal_of(self, transaction_id: UUID) -> Optional[Transaction]:
        """Retrieve the transaction that reverses ``transaction_id``, if any."""
        ...

    @abstractmethod
    async def apply_transaction(self, transaction: Transaction) -> Optional[Account]:
        """
        Insert a transaction and apply its balance change as one unit.

        Debits only succeed while the stored balance still covers the
        amount at write time.

        Args:
            transaction: The new, not yet persisted transaction

        Returns:
            The account with its updated balance, or None if it could not
            be read back after the commit

        Raises:
            DuplicateTransactionException: Idempotency key already stored
            TransactionAlreadyReversedException: Original already reversed
            InsufficientFundsException: Balance no longer covers the debit
            AccountNotFoundException: Account no longer exists
            StoreUnavailableException: Failure before anything was committed
            PartialApplyFailureException: Commit outcome unknown
        """
        ...
