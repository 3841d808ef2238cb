"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    ConflictException,
    DomainException,
    NotFoundException,
    ValidationException,
)
from .validation import (
    InvalidAccountNumberException,
    InvalidAmountException,
    InvalidCsvException,
    InvalidTransactionTypeException,
    MissingFieldsException,
    MissingIdempotencyKeyException,
    NoFileUploadedException,
)
from .account import (
    AccountAlreadyExistsException,
    AccountNotFoundException,
    InsufficientFundsException,
)
from .transaction import (
    DuplicateTransactionException,
    PartialApplyFailureException,
    TransactionAlreadyReversedException,
    TransactionNotFoundException,
)
from .store import StoreUnavailableException

__all__ = [
    "DomainException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "MissingIdempotencyKeyException",
    "MissingFieldsException",
    "InvalidAmountException",
    "InvalidTransactionTypeException",
    "InvalidAccountNumberException",
    "NoFileUploadedException",
    "InvalidCsvException",
    "AccountNotFoundException",
    "AccountAlreadyExistsException",
    "InsufficientFundsException",
    "TransactionNotFoundException",
    "DuplicateTransactionException",
    "TransactionAlreadyReversedException",
    "PartialApplyFailureException",
    "StoreUnavailableException",
]
