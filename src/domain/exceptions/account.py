"""Account-related domain exceptions."""

from decimal import Decimal

from .base import ConflictException, DomainException, NotFoundException


class AccountNotFoundException(NotFoundException):
    """Raised when an account number does not resolve to an account."""

    def __init__(self, account_number: int):
        super().__init__(
            message=f"Account not found: {account_number}",
            code="ACCOUNT_NOT_FOUND",
        )
        self.account_number = account_number


class AccountAlreadyExistsException(ConflictException):
    def __init__(self, account_number: int):
        super().__init__(
            message=f"Account with this account number already exists: {account_number}",
            code="ACCOUNT_ALREADY_EXISTS",
        )
        self.account_number = account_number


class InsufficientFundsException(DomainException):
    """Raised when a debit would take an account below zero."""

    def __init__(self, account_number: int, balance: Decimal, amount: Decimal):
        super().__init__(
            message=(
                f"Insufficient funds in account {account_number}: "
                f"balance {balance}, requested {amount}"
            ),
            code="INSUFFICIENT_FUNDS",
        )
        self.account_number = account_number
        self.balance = balance
        self.amount = amount
