"""Side cache interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheClient(ABC):
    """
    Best-effort key-value cache for read-mostly lookups.

    Entries are advisory. Implementations must never raise: a failed
    lookup is reported as a miss and a failed write or delete is logged.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return the cached snapshot, or None on a miss or failure."""
        ...

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        ...

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Invalidate keys; entries are deleted, never updated in place."""
        ...

    async def ping(self) -> bool:
        return True


def account_cache_key(account_number: int) -> str:
    return f"account:{account_number}"


def transaction_cache_key(transaction_id: Any) -> str:
    return f"transaction:{transaction_id}"
