"""
Explicit cache invalidation.
"""

from typing import TYPE_CHECKING, Optional

from shared.errors import StoreError, error_details
from shared.logging import get_logger

from service_bookcache.app.books.models import LookupRequest
from service_bookcache.app.caching.cache_keys import derive_key
from service_bookcache.app.caching.cache_store import RedisCacheStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class CacheInvalidator:
    """Removes the stored entry for a lookup request on demand."""

    def __init__(self, store: RedisCacheStore, *, metrics: Optional["MetricsCollector"] = None):
        self.store = store
        self.metrics = metrics
        self.logger = get_logger("bookcache.invalidator")

    async def invalidate(self, request: LookupRequest) -> str:
        """Delete the entry for request and return the key that was cleared."""
        key = derive_key(request)
        try:
            await self.store.delete(key)
        except StoreError as exc:
            self.logger.error("Cache invalidation failed", key=key, **error_details(exc))
            self._count("error")
            raise

        self.logger.info("Cache invalidated", key=key)
        self._count("ok")
        return key

    def _count(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("cache_invalidations_total", result=result)
