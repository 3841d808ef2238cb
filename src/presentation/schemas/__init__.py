"""Pydantic schemas for API request/response validation."""

from .transaction import (
    BulkUploadResponseSchema,
    RowOutcomeSchema,
    TransactionCreateSchema,
    TransactionLookupResponseSchema,
    TransactionResponseSchema,
    TransactionReverseSchema,
    TransactionSchema,
)
from .account import (
    AccountCreateSchema,
    AccountLookupResponseSchema,
    AccountLookupSchema,
    AccountResponseSchema,
    AccountSchema,
    MessageResponseSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "BulkUploadResponseSchema",
    "RowOutcomeSchema",
    "TransactionCreateSchema",
    "TransactionLookupResponseSchema",
    "TransactionResponseSchema",
    "TransactionReverseSchema",
    "TransactionSchema",
    "AccountCreateSchema",
    "AccountLookupResponseSchema",
    "AccountLookupSchema",
    "AccountResponseSchema",
    "AccountSchema",
    "MessageResponseSchema",
    "ErrorResponseSchema",
]
