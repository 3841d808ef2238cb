"""Request validation exceptions."""

from typing import Iterable

from .base import ValidationException


class MissingIdempotencyKeyException(ValidationException):
    def __init__(self):
        super().__init__(
            message="idempotencyKey is required",
            code="MISSING_IDEMPOTENCY_KEY",
        )


class MissingFieldsException(ValidationException):
    """Raised when required fields are absent or blank."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            message=f"Missing required fields: {', '.join(self.fields)}",
            code="MISSING_FIELDS",
        )


class InvalidAmountException(ValidationException):
    def __init__(self, amount: object):
        super().__init__(
            message=f"amount must be a positive number, got {amount!r}",
            code="INVALID_AMOUNT",
        )
        self.amount = amount


class InvalidTransactionTypeException(ValidationException):
    def __init__(self, txn_type: object):
        super().__init__(
            message=f"type must be 'credit' or 'debit', got {txn_type!r}",
            code="INVALID_TRANSACTION_TYPE",
        )
        self.txn_type = txn_type


class InvalidAccountNumberException(ValidationException):
    def __init__(self, account_number: object):
        super().__init__(
            message=f"accountNumber must be an integer, got {account_number!r}",
            code="INVALID_ACCOUNT_NUMBER",
        )
        self.account_number = account_number


class NoFileUploadedException(ValidationException):
    def __init__(self):
        super().__init__(message="No file uploaded", code="NO_FILE")


class InvalidCsvException(ValidationException):
    """Raised when an uploaded CSV cannot be read as transaction rows."""

    def __init__(self, message: str):
        super().__init__(message=f"Invalid CSV format: {message}", code="INVALID_CSV")
