"""Application services (use cases)."""

from .account_service import AccountService
from .batch_ingestion import BatchIngestionService
from .transaction_engine import TransactionEngine

__all__ = [
    "AccountService",
    "BatchIngestionService",
    "TransactionEngine",
]
