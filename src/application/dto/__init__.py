"""Data Transfer Objects for application layer."""

from .account import OpenAccountRequest
from .transaction import TransactionRequest

__all__ = [
    "OpenAccountRequest",
    "TransactionRequest",
]
