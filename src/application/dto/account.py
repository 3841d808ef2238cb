"""Data transfer objects for account operations."""

from dataclasses import dataclass
from typing import Any

from src.domain.entities import Account
from src.domain.exceptions import (
    InvalidAmountException,
    MissingFieldsException,
)

from .transaction import is_blank, parse_account_number, parse_money


@dataclass(frozen=True)
class OpenAccountRequest:
    """Input data for opening an account."""

    account_number: Any
    money: Any
    investor_id: Any

    def to_entity(self) -> Account:
        missing = [
            name
            for name, value in (
                ("accountNumber", self.account_number),
                ("money", self.money),
                ("investor", self.investor_id),
            )
            if is_blank(value)
        ]
        if missing:
            raise MissingFieldsException(missing)

        money = parse_money(self.money)
        if money < 0:
            raise InvalidAmountException(self.money)

        return Account(
            account_number=parse_account_number(self.account_number),
            money=money,
            investor_id=str(self.investor_id).strip(),
        )
