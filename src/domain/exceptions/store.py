"""Infrastructure-related domain exceptions."""

from .base import DomainException


class StoreUnavailableException(DomainException):
    """
    Raised when the ledger datastore fails or times out.

    Nothing was committed, so the operation is safe to retry.
    """

    def __init__(self, operation: str, detail: str | None = None):
        message = f"Ledger store unavailable during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message=message, code="STORE_UNAVAILABLE")
        self.operation = operation
