# cxclient/core/interfaces/http_client.py
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

class HttpClientPort(ABC):
    """Async HTTP transport.

    `get` and `post` return a dict with keys: 'status' (int), 'headers' (dict)
    and 'body' (parsed JSON or raw text). They never inspect the status code;
    callers validate it. Network failures and request timeouts raise
    `TransportError`.
    """

    @abstractmethod
    async def __aenter__(self) -> "HttpClientPort":
        """Async context manager entry method"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit method"""
        pass

    @abstractmethod
    async def get(
        self,
        url: str,
        params: Dict[str, Any] | None = None,
        timeout: float | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Dict[str, Any]:
        """Make a GET request.

        The timeout is optional; adapters may use an internal default
        when timeout is None.
        """
        pass

    @abstractmethod
    async def post(
        self,
        url: str,
        json: Dict[str, Any] | None,
        timeout: float | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Dict[str, Any]:
        """Make a POST request with a JSON body."""
        pass

    @abstractmethod
    def get_cookie(self, name: str) -> Optional[str]:
        """Return the value of a cookie stored by earlier responses."""
        pass

    @abstractmethod
    def clear_cookies(self) -> None:
        """Forget all cookies (used before a fresh login)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the HTTP client session"""
        pass
