"""
Unit tests for list/search state.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from vaxvet_console.cache import QueryCache, QueryTag
from vaxvet_console.schemas import OwnerSearch, PetSearch
from vaxvet_console.search import (
    SearchRegistry,
    SearchState,
    clean_criteria,
    has_criteria,
    is_empty_value,
    search_or_get_all,
)


class TestCriteria:
    """Tests for empty-criteria detection."""

    @pytest.mark.parametrize("value", [None, "", "   ", 0])
    def test_empty_values(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", ["Rex", 3, False])
    def test_filled_values(self, value):
        assert not is_empty_value(value)

    def test_all_empty_criteria_is_no_criteria(self):
        criteria = PetSearch(name="  ", species_id=0, breed_id=None)
        assert clean_criteria(criteria) is None
        assert not has_criteria(criteria)

    def test_clean_criteria_keeps_filled_fields(self):
        cleaned = clean_criteria(PetSearch(name=" Rex ", species_id=0, owner_id=4))
        assert cleaned.to_payload() == {"name": "Rex", "ownerId": 4}


class TestSearchState:
    """Tests for draft vs active search."""

    def test_draft_does_not_affect_active_until_submit(self):
        state = SearchState(model=OwnerSearch)
        state.update_draft(OwnerSearch(first_name="Ayse"))

        assert state.active is None
        assert state.submit().first_name == "Ayse"
        assert state.is_filtered

    def test_submitting_empty_draft_means_get_all(self):
        state = SearchState(model=OwnerSearch)
        state.update_draft(OwnerSearch(first_name=""))
        assert state.submit() is None
        assert not state.is_filtered

    def test_clear_resets_both(self):
        state = SearchState(model=OwnerSearch)
        state.update_draft(OwnerSearch(last_name="Demir"))
        state.submit()

        state.clear()

        assert state.active is None
        assert state.draft == OwnerSearch()

    def test_registry_keeps_one_state_per_list(self):
        registry = SearchRegistry()
        first = registry.get(QueryTag.OWNERS, OwnerSearch)
        assert registry.get("owners", OwnerSearch) is first
        assert registry.get(QueryTag.PETS, PetSearch) is not first


class TestSearchOrGetAll:
    """Tests for choosing between get_all and search."""

    @pytest.fixture
    def resource(self):
        client = Mock()
        client.get_all = AsyncMock(return_value=["all"])
        client.search = AsyncMock(return_value=["filtered"])
        return client

    @pytest.mark.asyncio
    async def test_empty_criteria_calls_get_all(self, resource):
        rows = await search_or_get_all(resource, QueryCache(), QueryTag.OWNERS, OwnerSearch(first_name=" "))

        assert rows == ["all"]
        resource.get_all.assert_awaited_once()
        resource.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_filled_criteria_calls_search_with_cleaned_criteria(self, resource):
        rows = await search_or_get_all(
            resource, QueryCache(), QueryTag.OWNERS, OwnerSearch(first_name="Ayse", last_name="")
        )

        assert rows == ["filtered"]
        sent = resource.search.await_args.args[0]
        assert sent.to_payload() == {"firstName": "Ayse"}
        resource.get_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_same_search_is_served_from_cache(self, resource):
        cache = QueryCache()
        criteria = OwnerSearch(first_name="Ayse")

        await search_or_get_all(resource, cache, QueryTag.OWNERS, criteria)
        await search_or_get_all(resource, cache, QueryTag.OWNERS, criteria)

        resource.search.assert_awaited_once()
