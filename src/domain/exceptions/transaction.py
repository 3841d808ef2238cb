"""Transaction-related domain exceptions."""

from src.domain.entities import Transaction

from .base import ConflictException, DomainException, NotFoundException


class TransactionNotFoundException(NotFoundException):
    def __init__(self, transaction_id: str):
        super().__init__(
            message=f"Transaction not found: {transaction_id}",
            code="TRANSACTION_NOT_FOUND",
        )
        self.transaction_id = transaction_id


class DuplicateTransactionException(ConflictException):
    """
    Raised when a transaction with the same idempotency key already exists.

    Carries the existing record so callers can treat the request as
    already applied instead of retrying.
    """

    def __init__(self, existing: Transaction):
        super().__init__(
            message=(
                "Transaction with this idempotencyKey already exists: "
                f"{existing.idempotency_key}"
            ),
            code="DUPLICATE_TRANSACTION",
        )
        self.existing = existing


class TransactionAlreadyReversedException(ConflictException):
    """Raised when reversing a transaction that already has a reversal."""

    def __init__(self, transaction_id: str, reversal: Transaction):
        super().__init__(
            message=f"Transaction already reversed: {transaction_id}",
            code="TRANSACTION_ALREADY_REVERSED",
        )
        self.transaction_id = transaction_id
        self.existing = reversal


class PartialApplyFailureException(DomainException):
    """
    Raised when a write's outcome is unknown.

    The transaction record and the balance change may disagree. This is
    never retried automatically; an operator has to reconcile it.
    """

    def __init__(self, transaction: Transaction, reason: str):
        super().__init__(
            message=(
                f"Transaction {transaction.id} ({transaction.idempotency_key}) "
                f"needs reconciliation: {reason}"
            ),
            code="PARTIAL_APPLY_FAILURE",
        )
        self.transaction = transaction
        self.reason = reason
