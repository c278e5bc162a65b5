"""
Open Library client used on cache misses.
"""

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.errors import OriginConnectionRefused, OriginTimeout, OriginTransportError, UpstreamError
from shared.logging import get_logger


DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "CacheBook/1.0"


class OpenLibraryClient:
    """Fetches raw book metadata from the Open Library API.

    Every call is a single attempt bounded by ``timeout`` seconds of wall
    clock. Retries, if any, belong to the caller.
    """

    def __init__(
        self,
        base_url: str = "https://openlibrary.org",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent
        self.logger = get_logger("bookcache.origin_client")

    async def fetch_by_identifier(self, identifier: str) -> bytes:
        """Fetch the edition record for an ISBN."""
        return await self._get(f"/isbn/{quote(identifier, safe='')}.json")

    async def fetch_by_query(self, text: str) -> bytes:
        """Run a title search."""
        return await self._get("/search.json", params={"title": text})

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        url = f"{self.base_url}{path}"
        self.logger.info("Fetching from origin", url=url, params=params)

        async def _request() -> httpx.Response:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
            ) as client:
                return await client.get(url, params=params)

        try:
            response = await asyncio.wait_for(_request(), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            self.logger.error("Origin request timed out", url=url, timeout=self.timeout)
            raise OriginTimeout(self.timeout) from exc
        except httpx.ConnectError as exc:
            self.logger.error("Origin connection failed", url=url, error=str(exc))
            raise OriginConnectionRefused() from exc
        except httpx.HTTPError as exc:
            self.logger.error("Origin transport error", url=url, error=str(exc))
            raise OriginTransportError(str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            self.logger.debug("Origin response received", url=url, status_code=response.status_code)
            return response.content

        self.logger.error(
            "Origin request failed",
            url=url,
            status_code=response.status_code,
            response=response.text,
        )
        raise UpstreamError(response.status_code, response.text)
