"""
Query cache for reads against the clinic API.

Results are keyed by an entity tag plus the serialized search criteria.
Successful mutations invalidate every entry under the tags they affect, so
the next read refetches.
"""

import hashlib
import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union
from loguru import logger

from .schemas.api import ApiModel

T = TypeVar("T")
Criteria = Union[ApiModel, Dict[str, Any], None]


class QueryTag(str, Enum):
    """Cache tags, one per cached resource view."""
    OWNERS = "owners"
    PETS = "pets"
    PETS_BY_OWNER = "pets-by-owner"
    CODES = "codes"
    SPECIES_OPTIONS = "species-options"
    BREEDS = "breeds"
    VACCINES = "vaccines"
    VACCINE_STOCKS = "vaccine-stocks"
    VACCINE_RECORDS = "vaccine-records"
    VETERINARIANS = "veterinarians"


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float


def _tag_name(tag: Union[QueryTag, str]) -> str:
    return tag.value if isinstance(tag, QueryTag) else str(tag)


def serialize_criteria(criteria: Criteria) -> Optional[str]:
    """Serialize criteria to a stable string, or None for "get all"."""
    if criteria is None:
        return None
    if isinstance(criteria, ApiModel):
        criteria = criteria.to_payload()
    return json.dumps(criteria, sort_keys=True, default=str)


class QueryCache:
    """In-memory query cache with time-based staleness."""

    def __init__(
        self,
        stale_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def generate_cache_key(self, tag: Union[QueryTag, str], criteria: Criteria = None) -> str:
        """
        Generate a cache key from a tag and search criteria.

        Args:
            tag: Entity tag (e.g. 'owners', 'breeds')
            criteria: Search criteria; None means the unfiltered list

        Returns:
            Cache key string
        """
        serialized = serialize_criteria(criteria)
        if serialized is None:
            return f"vaxvet:{_tag_name(tag)}:all"
        criteria_hash = hashlib.md5(serialized.encode()).hexdigest()[:12]
        return f"vaxvet:{_tag_name(tag)}:{criteria_hash}"

    def is_stale(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at >= self.stale_seconds

    def get(self, tag: Union[QueryTag, str], criteria: Criteria = None) -> Optional[Any]:
        """Get a fresh cached result, or None."""
        cache_key = self.generate_cache_key(tag, criteria)
        entry = self._entries.get(cache_key)
        if entry is None or self.is_stale(entry):
            return None
        return entry.data

    def set(self, tag: Union[QueryTag, str], data: Any, criteria: Criteria = None) -> None:
        cache_key = self.generate_cache_key(tag, criteria)
        self._entries[cache_key] = CacheEntry(data=data, fetched_at=self._clock())

    def __contains__(self, cache_key: str) -> bool:
        return cache_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def fetch(
        self,
        tag: Union[QueryTag, str],
        fetcher: Callable[[], Awaitable[T]],
        criteria: Criteria = None,
        enabled: bool = True,
        default: Any = None,
    ) -> T:
        """
        Read through the cache.

        Args:
            tag: Entity tag
            fetcher: Coroutine function performing the request
            criteria: Search criteria the result depends on
            enabled: When False the fetcher is not called and `default`
                is returned (dependent lookups with an unset dependency)
            default: Value returned for disabled queries

        Returns:
            Cached or freshly fetched result
        """
        if not enabled:
            logger.debug(f"Query {_tag_name(tag)} disabled, skipping fetch")
            return default

        cache_key = self.generate_cache_key(tag, criteria)
        entry = self._entries.get(cache_key)
        if entry is not None and not self.is_stale(entry):
            logger.debug(f"Cache HIT for key: {cache_key}")
            return entry.data

        logger.debug(f"Cache MISS for key: {cache_key}")
        data = await fetcher()
        self._entries[cache_key] = CacheEntry(data=data, fetched_at=self._clock())
        return data

    def invalidate(self, *tags: Union[QueryTag, str]) -> int:
        """
        Drop every entry under the given tags.

        Returns:
            Number of entries removed
        """
        prefixes = tuple(f"vaxvet:{_tag_name(tag)}:" for tag in tags)
        stale_keys = [key for key in self._entries if key.startswith(prefixes)]
        for key in stale_keys:
            del self._entries[key]

        if stale_keys:
            logger.debug(f"Invalidated {len(stale_keys)} entries for {[_tag_name(t) for t in tags]}")
        return len(stale_keys)

    def clear(self) -> None:
        self._entries.clear()

    async def mutate(
        self,
        mutation: Callable[[], Awaitable[T]],
        *tags: Union[QueryTag, str],
    ) -> T:
        """
        Run a mutation and invalidate the affected tags once it succeeds.

        A failing mutation leaves the cache untouched and re-raises.
        """
        result = await mutation()
        self.invalidate(*tags)
        return result
