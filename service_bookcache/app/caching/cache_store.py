"""
Redis-backed TTL store for cached origin payloads.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from shared.errors import StoreError, StoreUnavailable
from shared.logging import get_logger


class RedisCacheStore:
    """Key-value store with TTL semantics over a remote Redis.

    Payloads are opaque bytes. Expiry is left entirely to Redis, and no
    in-process layer sits on top of it.
    """

    def __init__(self, redis_url: str, *, socket_timeout: float = 5.0):
        self.redis_url = redis_url
        self.logger = get_logger("bookcache.cache_store")
        self._redis: redis.Redis = redis.from_url(
            redis_url,
            decode_responses=False,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )

    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored payload, or None when absent or expired."""
        try:
            value = await self._redis.get(key)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreUnavailable(details={"key": key, "error": str(exc)}) from exc
        except RedisError as exc:
            raise StoreError("Cache read failed", details={"key": key, "error": str(exc)}) from exc

        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    async def set_with_ttl(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store value under key, replacing any previous entry, expiring after ttl_seconds."""
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be a positive integer, got {ttl_seconds!r}")

        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreUnavailable(details={"key": key, "error": str(exc)}) from exc
        except RedisError as exc:
            raise StoreError("Cache write failed", details={"key": key, "error": str(exc)}) from exc

        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)

    async def delete(self, key: str) -> None:
        """Remove key. Deleting an absent key is not an error."""
        try:
            removed = await self._redis.delete(key)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreUnavailable(details={"key": key, "error": str(exc)}) from exc
        except RedisError as exc:
            raise StoreError("Failed to invalidate cache", details={"key": key, "error": str(exc)}) from exc

        self.logger.debug("Deleted cache key", key=key, removed=removed)

    async def ping(self) -> bool:
        """Return True when Redis responds to a ping."""
        try:
            return bool(await self._redis.ping())
        except RedisError as exc:
            self.logger.error("Redis health check failed", error=str(exc))
            return False

    async def close(self) -> None:
        """Close Redis connections."""
        await self._redis.aclose()
