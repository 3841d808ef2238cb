"""
Domain Interfaces (Ports)
"""

from .repositories import AccountRepository, LedgerStore
from .cache import CacheClient, account_cache_key, transaction_cache_key

__all__ = [
    "AccountRepository",
    "LedgerStore",
    "CacheClient",
    "account_cache_key",
    "transaction_cache_key",
]
