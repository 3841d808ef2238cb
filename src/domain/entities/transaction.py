"""Transaction entity representing a ledger credit or debit."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class TransactionType(str, Enum):
    """Type of ledger transaction."""

    CREDIT = "credit"  # Money in, increases the balance
    DEBIT = "debit"  # Money out, decreases the balance

    @property
    def inverse(self) -> "TransactionType":
        """The type that undoes this one."""
        if self is TransactionType.CREDIT:
            return TransactionType.DEBIT
        return TransactionType.CREDIT


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO 8601 UTC with a trailing Z."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class Transaction:
    """
    Immutable record of a single credit or debit against an account.

    A transaction is never updated once persisted. A reversal is a new
    transaction of the inverse type whose ``reversal_of`` points at the
    original.

    Attributes:
        idempotency_key: Client token guaranteeing at-most-once application
        account_number: Number of the account the transaction affects
        amount: Positive amount moved
        type: Whether this is a credit or debit
        id: Unique identifier
        date: Apply time
        reversal_of: Id of the transaction this one reverses, if any
    """

    idempotency_key: str
    account_number: int
    amount: Decimal
    type: TransactionType
    id: UUID = field(default_factory=uuid4)
    date: datetime = field(default_factory=utcnow)
    reversal_of: Optional[UUID] = None

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT

    @property
    def is_debit(self) -> bool:
        return self.type == TransactionType.DEBIT

    @property
    def is_reversal(self) -> bool:
        return self.reversal_of is not None

    @property
    def signed_amount(self) -> Decimal:
        """Balance delta this transaction applies."""
        return self.amount if self.is_credit else -self.amount

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "idempotencyKey": self.idempotency_key,
            "accountNumber": self.account_number,
            "amount": str(self.amount),
            "type": self.type.value,
            "date": format_timestamp(self.date),
            "reversalOf": str(self.reversal_of) if self.reversal_of else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """Rebuild a transaction from a ``to_dict`` snapshot."""
        reversal_of = data.get("reversalOf")
        return cls(
            id=UUID(data["id"]),
            idempotency_key=data["idempotencyKey"],
            account_number=int(data["accountNumber"]),
            amount=Decimal(str(data["amount"])),
            type=TransactionType(data["type"]),
            date=parse_timestamp(data["date"]),
            reversal_of=UUID(reversal_of) if reversal_of else None,
        )
