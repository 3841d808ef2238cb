"""Side cache implementations."""

from .redis_cache import RedisCacheClient

__all__ = [
    "RedisCacheClient",
]
