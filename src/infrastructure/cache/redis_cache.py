"""Redis implementation of CacheClient."""

import json
from typing import Any, Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.config import Settings, settings as default_settings
from src.core.metrics import record_cache_invalidation, record_cache_lookup
from src.domain.interfaces import CacheClient

logger = structlog.get_logger(__name__)


class RedisCacheClient(CacheClient):
    """
    Cache-aside client backed by Redis.

    Values are JSON snapshots stored with ``SET ... EX``. Every Redis error
    is logged and counted; reads then fall back to the store.
    """

    def __init__(self, redis: Optional[Redis] = None, enabled: bool = True):
        self._redis = redis
        self._enabled = enabled and redis is not None

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "RedisCacheClient":
        config = config or default_settings
        if not config.cache_enabled:
            return cls(redis=None, enabled=False)

        redis = Redis.from_url(
            config.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=config.cache_socket_timeout,
            socket_connect_timeout=config.cache_socket_timeout,
        )
        return cls(redis=redis)

    async def ping(self) -> bool:
        if not self._enabled:
            return False
        try:
            return bool(await self._redis.ping())
        except (RedisError, OSError) as e:
            logger.warning("cache_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        if not self._enabled:
            return None

        try:
            raw = await self._redis.get(key)
        except (RedisError, OSError) as e:
            record_cache_lookup(key, "error")
            logger.warning("cache_get_failed", key=key, error=str(e))
            return None

        if raw is None:
            record_cache_lookup(key, "miss")
            return None

        try:
            value = json.loads(raw)
        except ValueError:
            record_cache_lookup(key, "error")
            logger.warning("cache_entry_corrupt", key=key)
            await self.delete(key)
            return None

        record_cache_lookup(key, "hit")
        return value

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        if not self._enabled:
            return

        try:
            await self._redis.set(key, json.dumps(value), ex=ttl_seconds)
        except (RedisError, OSError) as e:
            logger.warning("cache_set_failed", key=key, error=str(e))

    async def delete(self, *keys: str) -> None:
        if not self._enabled or not keys:
            return

        try:
            await self._redis.delete(*keys)
        except (RedisError, OSError) as e:
            # A stale entry survives until its TTL expires.
            logger.error("cache_invalidation_failed", keys=list(keys), error=str(e))
            return

        for key in keys:
            record_cache_invalidation(key)
