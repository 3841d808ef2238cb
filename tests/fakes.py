"""
Test doubles shared by unit and integration tests.

Provides:
- In-memory cache client with a failure switch
- Ledger store wrapper that hides records from pre-checks, to stage races
"""

import json
from typing import Any, Optional
from uuid import UUID

from src.domain.entities import Account, Transaction
from src.domain.interfaces import CacheClient, LedgerStore


class InMemoryCacheClient(CacheClient):
    """Dict-backed cache that round-trips through JSON like Redis does."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.store: dict[str, str] = {}
        self.deleted: list[str] = []
        self.get_calls = 0

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        self.get_calls += 1
        if self.fail_mode:
            return None
        raw = self.store.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        if self.fail_mode:
            return
        self.store[key] = json.dumps(value)

    async def delete(self, *keys: str) -> None:
        if self.fail_mode:
            return
        for key in keys:
            self.deleted.append(key)
            self.store.pop(key, None)

    async def ping(self) -> bool:
        return not self.fail_mode


class BlindLedgerStore(LedgerStore):
    """
    Delegates writes to a real store but reports nothing on lookups.

    Lets a test reach the write path with a record already stored, the
    way a concurrent writer would between the check and the write.
    """

    def __init__(self, inner: LedgerStore):
        self._inner = inner

    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        return await self._inner.get_transaction_by_id(transaction_id)

    async def get_transaction_by_idempotency_key(
        self,
        idempotency_key: str,
    ) -> Optional[Transaction]:
        return None

    async def get_reversal_of(self, transaction_id: UUID) -> Optional[Transaction]:
        return None

    async def apply_transaction(self, transaction: Transaction) -> Optional[Account]:
        return await self._inner.apply_transaction(transaction)
