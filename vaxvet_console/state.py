"""
Process-wide console state shared by every screen.
"""

from dataclasses import dataclass, field
from typing import Optional

import httpx

from .api import ApiClients
from .auth import AuthStore
from .cache import QueryCache
from .config import Settings
from .notifications import NotificationInbox, NotificationListener
from .search import SearchRegistry


@dataclass
class ConsoleState:
    """Auth store, query cache, search state, notifications and API clients."""

    settings: Settings
    auth: AuthStore
    cache: QueryCache
    clients: ApiClients
    searches: SearchRegistry = field(default_factory=SearchRegistry)
    inbox: NotificationInbox = field(default_factory=NotificationInbox)
    listener: Optional[NotificationListener] = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ConsoleState":
        auth = AuthStore(settings.session_file)
        auth.load()

        clients = ApiClients.create(settings, token_provider=auth.get_token, transport=transport)
        state = cls(
            settings=settings,
            auth=auth,
            cache=QueryCache(stale_seconds=settings.cache_stale_seconds),
            clients=clients,
        )

        if settings.notifications_enabled:
            state.listener = NotificationListener(
                settings.get_notifications_url(),
                state.inbox,
                token_provider=auth.get_token,
            )
        return state

    async def aclose(self) -> None:
        if self.listener is not None:
            await self.listener.stop()
        await self.clients.aclose()
