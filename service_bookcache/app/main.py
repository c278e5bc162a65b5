"""
Book Cache proxy service.
"""

from typing import Dict, Optional

from fastapi import Query

from shared.base_service import BaseService

from service_bookcache.app.adapters.open_library_client import OpenLibraryClient
from service_bookcache.app.books.models import ByIdentifier, ByQuery
from service_bookcache.app.books.service import BookLookupService
from service_bookcache.app.caching.cache_store import RedisCacheStore
from service_bookcache.app.caching.hit_metrics import HitRateAccumulator
from service_bookcache.app.caching.invalidator import CacheInvalidator


class BookCacheService(BaseService):
    """Read-through cache proxy in front of Open Library."""

    def __init__(self, **config_overrides):
        super().__init__("bookcache", **config_overrides)

        self.cache_store = RedisCacheStore(
            self.config.redis_url,
            socket_timeout=self.config.redis_socket_timeout,
        )
        self.origin_client = OpenLibraryClient(
            self.config.origin_base_url,
            timeout=self.config.origin_timeout_seconds,
            user_agent=self.config.origin_user_agent,
        )
        self.hit_metrics = HitRateAccumulator()
        self.lookup_service = BookLookupService(
            self.cache_store,
            self.origin_client,
            self.hit_metrics,
            cache_ttl_seconds=self.config.cache_ttl_seconds,
            metrics=self.metrics,
        )
        self.invalidator = CacheInvalidator(self.cache_store, metrics=self.metrics)

        @self.app.on_event("startup")
        async def _startup():
            if await self.cache_store.ping():
                self.logger.info("Connected to Redis", redis_url=self.config.redis_url)
            else:
                # Lookups still work against the origin while Redis is down
                self.logger.error("Error connecting to Redis", redis_url=self.config.redis_url)
            self.logger.info(
                "Server starting",
                port=self.config.port,
                cache_ttl_seconds=self.config.cache_ttl_seconds,
            )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.cache_store.close()

        self._setup_book_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.bookcache_service = self

    def _setup_book_routes(self):
        """Set up lookup, invalidation and metrics routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "bookcache",
                "message": "Book Cache - Open Library read-through proxy",
                "version": "1.0.0"
            }

        @self.app.get("/api/books/{isbn}")
        async def get_book(isbn: str):
            """Look up a book by ISBN."""
            outcome = await self.lookup_service.lookup(ByIdentifier(isbn))
            return outcome.to_dict()

        @self.app.get("/api/books")
        async def search_books(title: Optional[str] = Query(None)):
            """Search books by title."""
            outcome = await self.lookup_service.lookup(ByQuery(title or ""))
            return outcome.to_dict()

        @self.app.delete("/api/cache/books/{isbn}")
        async def invalidate_book(isbn: str):
            """Drop the cached entry for an ISBN."""
            key = await self.invalidator.invalidate(ByIdentifier(isbn))
            return {"message": f"Cache for {key} has been invalidated"}

        @self.app.get("/api/metrics")
        async def cache_metrics():
            """Hit/miss counters since process start."""
            return self.hit_metrics.snapshot().to_dict()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"redis": "ok" if await self.cache_store.ping() else "error"}


def create_app():
    """Create FastAPI application."""
    service = BookCacheService()
    return service.app


def main():
    """Console entry point."""
    BookCacheService().run()


if __name__ == "__main__":
    main()
