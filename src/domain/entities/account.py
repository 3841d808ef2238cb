"""Account entity holding an investor's balance."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from .transaction import format_timestamp, parse_timestamp, utcnow


@dataclass
class Account:
    """
    An investor-owned account.

    ``money`` is only ever changed by the transaction engine; the investor
    is an opaque ownership reference.
    """

    account_number: int
    money: Decimal
    investor_id: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    def can_cover(self, amount: Decimal) -> bool:
        """Check whether a debit of ``amount`` would not overdraw the account."""
        return self.money >= amount

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "accountNumber": self.account_number,
            "money": str(self.money),
            "investor": self.investor_id,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=UUID(data["id"]),
            account_number=int(data["accountNumber"]),
            money=Decimal(str(data["money"])),
            investor_id=data["investor"],
            created_at=parse_timestamp(data["createdAt"]),
        )
