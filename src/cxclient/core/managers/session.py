"""SessionManager: the single owned, refreshable credential of one binding.

The SDK web service issues a session id at login; the REST API keeps its
session in cookies. Both are modeled the same way: an `authenticate`
coroutine produces a token, and the manager refreshes it on defined
triggers (explicit login, start of an OSA wait, OSA scan creation).
Refreshes are serialized with an `asyncio.Lock`; concurrent polling
sessions of one client still share the token.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from cxclient.core.exceptions import AuthError
from cxclient.core.settings import logger


class SessionManager:
    def __init__(self, authenticate: Callable[[], Awaitable[str]], name: str = "session"):
        self._authenticate = authenticate
        self._name = name
        self._token: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> str:
        """Current session token; raises AuthError before the first login."""
        if self._token is None:
            raise AuthError(f"Not logged in ({self._name}). Call login first.")
        return self._token

    async def refresh(self) -> str:
        """Re-authenticate and replace the token.

        The previous token stays readable until the new login succeeds, so
        waits polling on this session are not interrupted by a refresh.
        """
        async with self._lock:
            logger.debug("[session:%s] authenticating", self._name)
            token = await self._authenticate()
            self._token = token
            return token

    def invalidate(self) -> None:
        self._token = None
