"""
Tests for explicit cache invalidation.
"""

import pytest

from service_bookcache.app.books.models import ByIdentifier, ByQuery
from service_bookcache.app.caching.invalidator import CacheInvalidator
from shared.errors import StoreUnavailable
from shared.test_helpers import InMemoryCacheStore


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.mark.asyncio
async def test_invalidate_removes_entry(store):
    store.entries["book:0140328726"] = (b"{}", 3600)

    key = await CacheInvalidator(store).invalidate(ByIdentifier("0140328726"))

    assert key == "book:0140328726"
    assert "book:0140328726" not in store.entries


@pytest.mark.asyncio
async def test_invalidate_absent_key_succeeds(store):
    invalidator = CacheInvalidator(store)

    await invalidator.invalidate(ByIdentifier("never-cached"))
    await invalidator.invalidate(ByIdentifier("never-cached"))

    assert store.calls == [("delete", "book:never-cached"), ("delete", "book:never-cached")]


@pytest.mark.asyncio
async def test_invalidate_search_entry(store):
    store.entries["search:dune"] = (b"{}", 3600)

    key = await CacheInvalidator(store).invalidate(ByQuery("Dune"))

    assert key == "search:dune"
    assert store.entries == {}


@pytest.mark.asyncio
async def test_store_failure_propagates(store):
    store.go_down()

    with pytest.raises(StoreUnavailable):
        await CacheInvalidator(store).invalidate(ByIdentifier("0140328726"))
