"""
Read-through lookup service: Redis first, Open Library on a miss.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional

from shared.errors import FetchError, StoreError, error_details
from shared.logging import get_logger

from service_bookcache.app.adapters.open_library_client import OpenLibraryClient
from service_bookcache.app.books.models import ByIdentifier, CacheSource, LookupOutcome, LookupRequest
from service_bookcache.app.caching.cache_keys import derive_key
from service_bookcache.app.caching.cache_store import RedisCacheStore
from service_bookcache.app.caching.hit_metrics import HitRateAccumulator

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class BookLookupService:
    """Coordinates cache reads, origin fetches and write-through for book lookups.

    The store and the hit accumulator are shared, process-wide objects handed
    in by the caller; this service owns neither.
    """

    def __init__(
        self,
        store: RedisCacheStore,
        fetcher: OpenLibraryClient,
        hit_metrics: HitRateAccumulator,
        *,
        cache_ttl_seconds: int,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        if cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        self.store = store
        self.fetcher = fetcher
        self.hit_metrics = hit_metrics
        self.cache_ttl_seconds = cache_ttl_seconds
        self.metrics = metrics
        self.logger = get_logger("bookcache.lookup")

    async def lookup(self, request: LookupRequest) -> LookupOutcome:
        """
        Serve a lookup from the cache, falling back to the origin.

        Exactly one of hit/miss is recorded per lookup that gets past the cache
        read. Cache backend failures never fail the lookup: a failed read is a
        miss, a failed write is logged and the fetched payload is still
        returned. Origin failures propagate as FetchError without touching the
        cache.
        """
        key = derive_key(request)
        lookup_type = request.lookup_type

        cached = await self._read_cache(key)
        if cached is not None:
            self.hit_metrics.record_hit()
            self._record_access(lookup_type, hit=True)
            self.logger.info("Cache HIT", key=key)
            return LookupOutcome(source=CacheSource.CACHE, payload=cached)

        self.hit_metrics.record_miss()
        self._record_access(lookup_type, hit=False)
        self.logger.info("Cache MISS", key=key)

        payload = await self._fetch(request)
        await self._write_cache(key, payload)
        return LookupOutcome(source=CacheSource.ORIGIN, payload=payload)

    async def _read_cache(self, key: str) -> Optional[bytes]:
        """Read from the store, degrading to a miss when the backend fails."""
        try:
            return await self.store.get(key)
        except StoreError as exc:
            self.logger.warning(
                "Cache unavailable, treating lookup as miss",
                key=key,
                code=exc.code,
                error=exc.message,
                details=exc.details,
            )
            self._record_store_error("get")
            return None

    async def _write_cache(self, key: str, payload: bytes) -> None:
        """Write-through; failures are reported, never raised."""
        try:
            await self.store.set_with_ttl(key, payload, self.cache_ttl_seconds)
        except StoreError as exc:
            self.logger.error(
                "Cache write failed, returning origin payload uncached",
                key=key,
                code=exc.code,
                error=exc.message,
                details=exc.details,
            )
            self._record_store_error("set")

    async def _fetch(self, request: LookupRequest) -> bytes:
        lookup_type = request.lookup_type
        start = time.perf_counter()
        outcome = "aborted"
        try:
            if isinstance(request, ByIdentifier):
                payload = await self.fetcher.fetch_by_identifier(request.identifier)
            else:
                payload = await self.fetcher.fetch_by_query(request.text)
            outcome = "ok"
            return payload
        except FetchError as exc:
            outcome = exc.code.lower()
            self.logger.error("Origin fetch failed", lookup_type=lookup_type, **error_details(exc))
            raise
        finally:
            if self.metrics:
                self.metrics.increment_counter("origin_requests_total", lookup_type=lookup_type, outcome=outcome)
                self.metrics.observe_histogram(
                    "origin_request_duration_seconds",
                    time.perf_counter() - start,
                    lookup_type=lookup_type,
                )

    def _record_access(self, lookup_type: str, *, hit: bool) -> None:
        if not self.metrics:
            return
        metric_name = "cache_hits_total" if hit else "cache_misses_total"
        self.metrics.increment_counter(metric_name, lookup_type=lookup_type)
        snapshot = self.hit_metrics.snapshot()
        if snapshot.total:
            self.metrics.set_gauge("cache_hit_ratio", snapshot.hits / snapshot.total)

    def _record_store_error(self, operation: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("cache_store_errors_total", operation=operation)
