# cxclient/adapters/aiohttp_client_adapter.py
import asyncio
import aiohttp
from typing import Any, Dict, Optional

from cxclient.core.interfaces.http_client import HttpClientPort
from cxclient.core.exceptions import TransportError
from cxclient.core.settings import logger


class AioHttpClientAdapter(HttpClientPort):
    def __init__(self, verify_ssl: bool = True, default_timeout: float = 60.0):
        self._session: Optional[aiohttp.ClientSession] = None
        self._verify_ssl = verify_ssl
        # Default client timeout configuration for individual requests.
        # Status queries are short; long waits happen between queries, not inside them.
        self._default_total: float = default_timeout
        self._default_sock_connect: float = 10.0
        self._default_client_timeout = aiohttp.ClientTimeout(
            total=self._default_total,
            sock_connect=self._default_sock_connect,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        if self._session is None:
            # ssl=False disables certificate verification for self-signed servers
            connector = aiohttp.TCPConnector(ssl=None if self._verify_ssl else False)
            # unsafe=True keeps cookies of servers addressed by IP
            self._session = aiohttp.ClientSession(
                connector=connector,
                cookie_jar=aiohttp.CookieJar(unsafe=True),
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    def _timeout(self, timeout: float | None) -> aiohttp.ClientTimeout:
        if timeout is None:
            return self._default_client_timeout
        # Keep adapter-level sock_connect but apply provided total
        return aiohttp.ClientTimeout(total=timeout, sock_connect=self._default_sock_connect)

    async def get(
        self,
        url: str,
        params: Dict[str, Any] | None = None,
        timeout: float | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET", url, params=params, timeout=self._timeout(timeout), headers=headers
        )

    async def post(
        self,
        url: str,
        json: Dict[str, Any] | None,
        timeout: float | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", url, json=json, timeout=self._timeout(timeout), headers=headers
        )

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        """
        Perform a request and return status, headers and body.

        Translates network errors and timeouts into `TransportError`. The
        status code is returned to the caller, which decides what is a
        protocol failure for the operation at hand.
        """
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        try:
            async with self._session.request(method, url, **kwargs) as response:
                try:
                    # Attempt to parse JSON from the response
                    body: Any = await response.json()
                except (aiohttp.ContentTypeError, ValueError):
                    # Not JSON (or malformed JSON); keep raw text for diagnostics
                    body = await response.text()

                return {
                    "status": response.status,
                    "headers": dict(response.headers),
                    "body": body,
                }

        except asyncio.TimeoutError as timeout_error:
            logger.error("Timeout when requesting remote service. %s URL: %s", method, url)
            raise TransportError(
                f"Request timed out: {method} {url}",
                diagnostic=str(timeout_error) or "timeout",
            ) from timeout_error

        except aiohttp.ClientError as client_error:
            logger.error(
                "Connection error when requesting remote service. %s URL: %s, Error: %s",
                method,
                url,
                str(client_error),
            )
            raise TransportError(
                f"Connection error: {method} {url}: {client_error}",
                diagnostic=str(client_error),
            ) from client_error

    def get_cookie(self, name: str) -> Optional[str]:
        if self._session is None:
            return None
        for morsel in self._session.cookie_jar:
            if morsel.key == name:
                return morsel.value
        return None

    def clear_cookies(self) -> None:
        if self._session is not None:
            self._session.cookie_jar.clear()

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
