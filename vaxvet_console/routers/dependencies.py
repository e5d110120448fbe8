"""
Shared dependencies and response helpers for the console screens.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union

from fastapi import Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from loguru import logger

from ..api.base import ApiError
from ..auth import LoginRequired
from ..cache import QueryTag
from ..forms import form_to_dict
from ..schemas.auth import CurrentUser
from ..state import ConsoleState
from ..views import components


def get_console(request: Request) -> ConsoleState:
    """Get the process-wide console state."""
    return request.app.state.console


async def require_user(console: ConsoleState = Depends(get_console)) -> CurrentUser:
    """Route guard: only signed-in operators may open a screen."""
    if not console.auth.is_authenticated or console.auth.user is None:
        raise LoginRequired()
    return console.auth.user


async def read_form(request: Request) -> Dict[str, str]:
    """Read and sanitize a submitted form."""
    return form_to_dict(await request.form())


def render(
    console: ConsoleState,
    title: str,
    content: str,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    """Render a screen inside the console layout."""
    html = components.page(
        title,
        content,
        user=console.auth.user if console.auth.is_authenticated else None,
        notifications=console.inbox.peek(),
    )
    return HTMLResponse(html, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


async def run_mutation(
    console: ConsoleState,
    mutation: Callable[[], Awaitable[Any]],
    tags: Tuple[Union[QueryTag, str], ...],
    fallback: str,
) -> Optional[str]:
    """
    Run a mutation through the cache.

    Returns:
        None on success, otherwise the message to show inline
    """
    try:
        await console.cache.mutate(mutation, *tags)
    except ApiError as e:
        logger.warning(f"Mutation failed: {e.message}")
        return e.message or fallback
    return None


async def load_or_error(fetch: Callable[[], Awaitable[Any]], default: Any = None) -> Tuple[Any, Optional[str]]:
    """
    Await a query, converting an API failure into an inline message.

    Returns:
        Tuple of (result or default, error message or None)
    """
    try:
        return await fetch(), None
    except ApiError as e:
        logger.warning(f"Query failed: {e.message}")
        return default, e.message


async def get_entity(console: ConsoleState, tag: QueryTag, client: Any, entity_id: Any) -> Any:
    """Fetch one record through the cache under its list tag."""
    return await console.cache.fetch(
        tag,
        lambda: client.get_by_id(entity_id),
        criteria={"byId": str(entity_id)},
    )
