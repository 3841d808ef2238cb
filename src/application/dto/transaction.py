"""Data transfer objects for transaction operations."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from src.domain.entities import Transaction, TransactionType
from src.domain.exceptions import (
    InvalidAccountNumberException,
    InvalidAmountException,
    InvalidTransactionTypeException,
    MissingFieldsException,
    MissingIdempotencyKeyException,
)

# Bounds of the storage columns: NUMERIC(20, 4) and a 32-bit INTEGER.
MONEY_QUANTUM = Decimal("0.0001")
MONEY_LIMIT = Decimal(10) ** 16
ACCOUNT_NUMBER_MIN = -(2 ** 31)
ACCOUNT_NUMBER_MAX = 2 ** 31 - 1


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_money(value: Any) -> Decimal:
    """
    Parse a finite decimal that the ledger can store exactly.

    Values with more than four decimal places, or of 10^16 or more in
    magnitude, are rejected rather than rounded by the database.

    Raises:
        InvalidAmountException: If the value is not such a number
    """
    if isinstance(value, bool):
        raise InvalidAmountException(value)
    try:
        amount = Decimal(value.strip() if isinstance(value, str) else str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountException(value)
    if not amount.is_finite() or abs(amount) >= MONEY_LIMIT:
        raise InvalidAmountException(value)
    if amount != amount.quantize(MONEY_QUANTUM):
        raise InvalidAmountException(value)
    return amount


def parse_amount(value: Any) -> Decimal:
    """Parse a positive amount from a JSON number or a string."""
    amount = parse_money(value)
    if amount <= 0:
        raise InvalidAmountException(value)
    return amount


def parse_account_number(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidAccountNumberException(value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
        number = int(value.strip())
    else:
        raise InvalidAccountNumberException(value)

    if not ACCOUNT_NUMBER_MIN <= number <= ACCOUNT_NUMBER_MAX:
        raise InvalidAccountNumberException(value)
    return number


def parse_transaction_type(value: Any) -> TransactionType:
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        raise InvalidTransactionTypeException(value)


@dataclass(frozen=True)
class TransactionRequest:
    """
    Raw input for applying a transaction.

    Values are kept as received; ``to_entity`` validates them explicitly so
    the single and bulk paths enforce the same rules.
    """

    idempotency_key: Optional[str]
    account_number: Any
    amount: Any
    type: Any

    def missing_fields(self) -> list[str]:
        fields = {
            "accountNumber": self.account_number,
            "amount": self.amount,
            "type": self.type,
        }
        return [name for name, value in fields.items() if is_blank(value)]

    def to_entity(self) -> Transaction:
        """
        Validate the request and build the transaction to apply.

        Raises:
            MissingIdempotencyKeyException: If the key is absent or blank
            MissingFieldsException: If any other field is absent or blank
            InvalidAccountNumberException: If accountNumber is not an integer
            InvalidAmountException: If amount is not a positive number
            InvalidTransactionTypeException: If type is not credit/debit
        """
        if is_blank(self.idempotency_key):
            raise MissingIdempotencyKeyException()

        missing = self.missing_fields()
        if missing:
            raise MissingFieldsException(missing)

        return Transaction(
            idempotency_key=str(self.idempotency_key).strip(),
            account_number=parse_account_number(self.account_number),
            amount=parse_amount(self.amount),
            type=parse_transaction_type(self.type),
        )
