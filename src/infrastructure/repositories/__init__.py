"""Repository implementations."""

from .account_repository import SqlAccountRepository
from .ledger_store import SqlLedgerStore

__all__ = [
    "SqlAccountRepository",
    "SqlLedgerStore",
]
