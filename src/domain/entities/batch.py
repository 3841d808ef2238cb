"""Outcome records for bulk transaction ingestion."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .transaction import Transaction


class RowOutcomeReason(str, Enum):
    """Why a bulk row was skipped or failed."""

    MISSING_FIELDS = "MISSING_FIELDS"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    DUPLICATE_IN_BATCH = "DUPLICATE_IN_BATCH"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_TRANSACTION_TYPE = "INVALID_TRANSACTION_TYPE"
    INVALID_ACCOUNT_NUMBER = "INVALID_ACCOUNT_NUMBER"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    PARTIAL_APPLY_FAILURE = "PARTIAL_APPLY_FAILURE"


@dataclass(frozen=True)
class RowOutcome:
    """A skipped or failed row, kept so the client can resubmit it."""

    row_number: int
    row: dict
    reason: RowOutcomeReason
    message: str
    existing_transaction: Optional[Transaction] = None

    def to_dict(self) -> dict:
        data = {
            "rowNumber": self.row_number,
            "row": self.row,
            "reason": self.reason.value,
            "message": self.message,
        }
        if self.existing_transaction is not None:
            data["existingTransaction"] = self.existing_transaction.to_dict()
        return data


@dataclass
class BatchReport:
    """
    Aggregated result of one bulk upload.

    Lives only for the duration of the request; it is never persisted.
    """

    inserted: List[Transaction] = field(default_factory=list)
    skipped: List[RowOutcome] = field(default_factory=list)
    failed: List[RowOutcome] = field(default_factory=list)

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total(self) -> int:
        return self.inserted_count + self.skipped_count + self.failed_count
