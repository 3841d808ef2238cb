"""Domain Entities - Core business objects."""

from .account import Account
from .batch import BatchReport, RowOutcome, RowOutcomeReason
from .transaction import Transaction, TransactionType

__all__ = [
    "Account",
    "BatchReport",
    "RowOutcome",
    "RowOutcomeReason",
    "Transaction",
    "TransactionType",
]
