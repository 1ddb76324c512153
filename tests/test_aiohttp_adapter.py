import asyncio

import aiohttp
import pytest
from aioresponses import aioresponses

from cxclient.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from cxclient.core.exceptions import TransportError

"""
Tests for AioHttpClientAdapter behavior.

The adapter is a pure transport: it returns status, headers and body for
every HTTP answer and leaves status validation to the caller. Expected
outcomes:
- JSON responses are parsed into Python objects.
- Non-JSON responses are returned as raw text.
- Error status codes are returned, not raised.
- Network timeouts and connection errors map to TransportError, which the
    polling engine treats as a retryable status query failure.
"""


@pytest.mark.asyncio
async def test_get_json_response():
    # Happy path: the server returns valid JSON which the adapter parses.
    url = "http://cx.example.test/CxRestAPI/osa/scans/abc"
    with aioresponses() as m:
        m.get(url, payload={"id": "abc", "state": {"id": 1, "name": "InProgress"}}, status=200)

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["status"] == 200
            assert resp["body"]["state"]["name"] == "InProgress"


@pytest.mark.asyncio
async def test_get_non_json_response_returns_text():
    # A login page or proxy error page instead of JSON: keep the raw text so
    # the caller can include it in its error message.
    url = "http://cx.example.test/cxwebinterface/sdk/CxSDKWebService.asmx"
    with aioresponses() as m:
        m.get(url, body="<html>service</html>", status=200, headers={"Content-Type": "text/html"})

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["status"] == 200
            assert resp["body"] == "<html>service</html>"


@pytest.mark.asyncio
async def test_post_returns_error_status():
    # Error statuses are data for the caller, not exceptions.
    url = "http://cx.example.test/CxRestAPI/auth/login"
    with aioresponses() as m:
        m.post(url, payload={"messageCode": 12, "messageDetails": "Invalid credentials"}, status=400)

        async with AioHttpClientAdapter() as client:
            resp = await client.post(url, json={"userName": "u", "password": "p"})
            assert resp["status"] == 400
            assert resp["body"]["messageDetails"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_timeout_raises_transport_error():
    url = "http://cx.example.test/slow"
    with aioresponses() as m:
        m.get(url, exception=asyncio.TimeoutError())

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.get(url)
            assert "timed out" in excinfo.value.message


@pytest.mark.asyncio
async def test_connection_error_raises_transport_error():
    url = "http://cx.example.test/down"
    with aioresponses() as m:
        m.post(url, exception=aiohttp.ClientConnectionError("connection refused"))

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.post(url, json={})
            assert "connection refused" in excinfo.value.diagnostic


@pytest.mark.asyncio
async def test_request_outside_context_manager_is_rejected():
    client = AioHttpClientAdapter()
    with pytest.raises(RuntimeError):
        await client.get("http://cx.example.test/")


@pytest.mark.asyncio
async def test_cookie_helpers_without_session():
    client = AioHttpClientAdapter()
    assert client.get_cookie("CXCSRFToken") is None
    client.clear_cookies()
    await client.close()
