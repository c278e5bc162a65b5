"""
Unit tests for the Open Library origin client.
"""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from service_bookcache.app.adapters.open_library_client import OpenLibraryClient
from shared.errors import OriginConnectionRefused, OriginTimeout, OriginTransportError, UpstreamError


def _response(status_code: int, body, url: str = "https://openlibrary.org/isbn/0140328726.json") -> httpx.Response:
    content = json.dumps(body) if not isinstance(body, str) else body
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("GET", url),
    )


class TestOpenLibraryClient:
    """Test cases for OpenLibraryClient."""

    @pytest.fixture
    def client(self):
        """Create OpenLibraryClient instance."""
        return OpenLibraryClient("https://openlibrary.org/", timeout=10.0)

    @pytest.mark.asyncio
    async def test_fetch_by_identifier_returns_raw_body(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_get = AsyncMock(return_value=_response(200, {"title": "Fantastic Mr. Fox"}))
            mock_client.return_value.__aenter__.return_value.get = mock_get

            result = await client.fetch_by_identifier("0140328726")

            assert json.loads(result) == {"title": "Fantastic Mr. Fox"}
            mock_get.assert_awaited_once_with("https://openlibrary.org/isbn/0140328726.json", params=None)

    @pytest.mark.asyncio
    async def test_client_identity_and_bounds(self, client):
        """Requests carry the fixed User-Agent, the timeout, and follow redirects."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=_response(200, {}))

            await client.fetch_by_identifier("0140328726")

            kwargs = mock_client.call_args.kwargs
            assert kwargs["headers"] == {"User-Agent": "CacheBook/1.0"}
            assert kwargs["timeout"] == 10.0
            assert kwargs["follow_redirects"] is True

    @pytest.mark.asyncio
    async def test_identifier_is_path_encoded(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_get = AsyncMock(return_value=_response(200, {}))
            mock_client.return_value.__aenter__.return_value.get = mock_get

            await client.fetch_by_identifier("a/b c")

            assert mock_get.await_args.args[0] == "https://openlibrary.org/isbn/a%2Fb%20c.json"

    @pytest.mark.asyncio
    async def test_fetch_by_query_passes_title_param(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_get = AsyncMock(return_value=_response(200, {"numFound": 1, "docs": []}))
            mock_client.return_value.__aenter__.return_value.get = mock_get

            result = await client.fetch_by_query("Lord of the Rings & more")

            assert json.loads(result)["numFound"] == 1
            mock_get.assert_awaited_once_with(
                "https://openlibrary.org/search.json",
                params={"title": "Lord of the Rings & more"},
            )

    @pytest.mark.asyncio
    async def test_non_success_status_is_upstream_error(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=_response(404, "Not Found")
            )

            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_by_identifier("0000000000")

            assert exc_info.value.status == 404
            assert exc_info.value.body == "Not Found"
            assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_connect_error_is_connection_refused(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ConnectError("[Errno 111] Connection refused")
            )

            with pytest.raises(OriginConnectionRefused) as exc_info:
                await client.fetch_by_identifier("0140328726")

            assert exc_info.value.status_code == 503
            assert exc_info.value.details == "Connection refused"

    @pytest.mark.asyncio
    async def test_httpx_timeout_is_origin_timeout(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ReadTimeout("timed out")
            )

            with pytest.raises(OriginTimeout) as exc_info:
                await client.fetch_by_query("dune")

            assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_wall_clock_bound_cancels_slow_origin(self):
        """A response that trickles in past the bound is cancelled and surfaces as a timeout."""
        client = OpenLibraryClient("https://openlibrary.org", timeout=0.05)

        async def _slow(*args, **kwargs):
            await asyncio.sleep(5)
            return _response(200, {})

        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(side_effect=_slow)

            with pytest.raises(OriginTimeout):
                await client.fetch_by_identifier("0140328726")

    @pytest.mark.asyncio
    async def test_other_transport_failure(self, client):
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.RemoteProtocolError("peer closed connection")
            )

            with pytest.raises(OriginTransportError) as exc_info:
                await client.fetch_by_identifier("0140328726")

            assert exc_info.value.status_code == 500
            assert "peer closed connection" in exc_info.value.details
