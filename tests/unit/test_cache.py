"""
Unit tests for the query cache.
"""

import pytest
from unittest.mock import AsyncMock

from vaxvet_console.api.base import ApiError
from vaxvet_console.cache import QueryCache, QueryTag
from vaxvet_console.schemas import OwnerSearch


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestCacheKeys:
    """Tests for cache key generation."""

    def test_get_all_key(self):
        cache = QueryCache()
        assert cache.generate_cache_key(QueryTag.OWNERS) == "vaxvet:owners:all"

    def test_criteria_key_is_order_independent(self):
        cache = QueryCache()
        first = cache.generate_cache_key("pets", {"name": "Rex", "speciesId": 1})
        second = cache.generate_cache_key("pets", {"speciesId": 1, "name": "Rex"})
        assert first == second
        assert first.startswith("vaxvet:pets:")

    def test_model_criteria_match_dict_criteria(self):
        cache = QueryCache()
        model_key = cache.generate_cache_key(QueryTag.OWNERS, OwnerSearch(first_name="Ayse"))
        dict_key = cache.generate_cache_key(QueryTag.OWNERS, {"firstName": "Ayse"})
        assert model_key == dict_key


class TestQueryCache:
    """Tests for fetch, invalidation and mutations."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return QueryCache(stale_seconds=30, clock=clock)

    @pytest.mark.asyncio
    async def test_fetch_caches_result(self, cache):
        fetcher = AsyncMock(return_value=["owner"])

        assert await cache.fetch(QueryTag.OWNERS, fetcher) == ["owner"]
        assert await cache.fetch(QueryTag.OWNERS, fetcher) == ["owner"]
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stale_entry_is_refetched(self, cache, clock):
        fetcher = AsyncMock(side_effect=[["old"], ["new"]])

        await cache.fetch(QueryTag.OWNERS, fetcher)
        clock.now += 30
        assert await cache.fetch(QueryTag.OWNERS, fetcher) == ["new"]
        assert fetcher.await_count == 2

    @pytest.mark.asyncio
    async def test_different_criteria_are_cached_separately(self, cache):
        fetcher = AsyncMock(side_effect=[["cats"], ["dogs"]])

        assert await cache.fetch(QueryTag.BREEDS, fetcher, criteria={"speciesId": 1}) == ["cats"]
        assert await cache.fetch(QueryTag.BREEDS, fetcher, criteria={"speciesId": 2}) == ["dogs"]
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_disabled_query_never_fetches(self, cache):
        fetcher = AsyncMock(return_value=["breed"])

        result = await cache.fetch(QueryTag.BREEDS, fetcher, criteria={"speciesId": 0}, enabled=False, default=[])

        assert result == []
        fetcher.assert_not_awaited()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, cache):
        fetcher = AsyncMock(side_effect=[ApiError("boom"), ["owner"]])

        with pytest.raises(ApiError):
            await cache.fetch(QueryTag.OWNERS, fetcher)
        assert await cache.fetch(QueryTag.OWNERS, fetcher) == ["owner"]

    @pytest.mark.asyncio
    async def test_invalidate_drops_only_given_tags(self, cache):
        await cache.fetch(QueryTag.PETS, AsyncMock(return_value=[]))
        await cache.fetch(QueryTag.PETS_BY_OWNER, AsyncMock(return_value=[]), criteria={"ownerId": 1})
        await cache.fetch(QueryTag.OWNERS, AsyncMock(return_value=[]))

        removed = cache.invalidate(QueryTag.PETS)

        assert removed == 1
        assert cache.get(QueryTag.PETS) is None
        assert cache.get(QueryTag.PETS_BY_OWNER, {"ownerId": 1}) == []
        assert cache.get(QueryTag.OWNERS) == []

    @pytest.mark.asyncio
    async def test_mutation_invalidates_on_success(self, cache):
        await cache.fetch(QueryTag.OWNERS, AsyncMock(return_value=["a"]))

        result = await cache.mutate(AsyncMock(return_value="created"), QueryTag.OWNERS)

        assert result == "created"
        assert cache.get(QueryTag.OWNERS) is None

    @pytest.mark.asyncio
    async def test_failed_mutation_keeps_cache(self, cache):
        await cache.fetch(QueryTag.OWNERS, AsyncMock(return_value=["a"]))

        with pytest.raises(ApiError):
            await cache.mutate(AsyncMock(side_effect=ApiError("Version conflict")), QueryTag.OWNERS)

        assert cache.get(QueryTag.OWNERS) == ["a"]

    def test_clear(self, cache):
        cache.set(QueryTag.CODES, ["code"])
        cache.clear()
        assert len(cache) == 0
