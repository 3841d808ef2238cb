"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager
from .models import Base, AccountModel, TransactionModel

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "Base",
    "AccountModel",
    "TransactionModel",
]
