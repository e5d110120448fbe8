"""
List/search state shared by every list screen.

Each list keeps the in-progress search form (`draft`) apart from the criteria
actually sent to the server (`active`). Criteria with no filled field never
reach the search endpoint: the list falls back to "get all".
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

from .api.base import ResourceClient
from .cache import QueryCache, QueryTag
from .schemas.api import ApiModel

CriteriaT = TypeVar("CriteriaT", bound=ApiModel)


def is_empty_value(value: Any) -> bool:
    """None, blank strings and zero IDs count as "not filtered"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    return False


def clean_criteria(criteria: Optional[CriteriaT]) -> Optional[CriteriaT]:
    """
    Drop empty fields from search criteria.

    Returns:
        A copy holding only filled fields, or None when nothing is filled
    """
    if criteria is None:
        return None

    filled = {
        name: (value.strip() if isinstance(value, str) else value)
        for name, value in criteria.model_dump().items()
        if not is_empty_value(value)
    }
    if not filled:
        return None
    return type(criteria).model_validate(filled)


def has_criteria(criteria: Optional[ApiModel]) -> bool:
    """Check whether any search field is filled."""
    return clean_criteria(criteria) is not None


@dataclass
class SearchState(Generic[CriteriaT]):
    """Draft and active search criteria of one list screen."""

    model: Type[CriteriaT]
    draft: Optional[CriteriaT] = None
    active: Optional[CriteriaT] = None

    def __post_init__(self):
        if self.draft is None:
            self.draft = self.model()

    def update_draft(self, criteria: CriteriaT) -> None:
        self.draft = criteria

    def submit(self) -> Optional[CriteriaT]:
        """Copy the draft into the active search ("Search" button)."""
        self.active = clean_criteria(self.draft)
        return self.active

    def clear(self) -> None:
        """Reset both the draft and the active search ("Clear" button)."""
        self.draft = self.model()
        self.active = None

    @property
    def is_filtered(self) -> bool:
        return self.active is not None


@dataclass
class SearchRegistry:
    """Process-wide search state, one entry per list screen."""

    states: dict = field(default_factory=dict)

    def get(self, tag: Union[QueryTag, str], model: Type[CriteriaT]) -> SearchState[CriteriaT]:
        key = tag.value if isinstance(tag, QueryTag) else tag
        state = self.states.get(key)
        if state is None:
            state = SearchState(model=model)
            self.states[key] = state
        return state


async def search_or_get_all(
    client: ResourceClient,
    cache: QueryCache,
    tag: Union[QueryTag, str],
    criteria: Optional[ApiModel] = None,
) -> List[Any]:
    """
    Load a list screen's rows through the cache.

    Args:
        client: Resource client for the entity
        cache: Query cache
        tag: Cache tag of the entity list
        criteria: Active search criteria, possibly empty

    Returns:
        Rows from `search` when any field is filled, else from `get_all`
    """
    cleaned = clean_criteria(criteria)
    if cleaned is None:
        return await cache.fetch(tag, client.get_all)
    return await cache.fetch(tag, lambda: client.search(cleaned), criteria=cleaned)
