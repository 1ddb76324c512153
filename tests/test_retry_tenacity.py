"""Tests for the tenacity based retry adapter."""

from unittest.mock import AsyncMock

import pytest

from cxclient.adapters.retry_tenacity import TenacityRetryAdapter
from cxclient.core.exceptions import ProtocolError, TransportError
from cxclient.core.settings import CxSettings


@pytest.fixture
def retry():
    return TenacityRetryAdapter(attempts=3, wait_initial=0, wait_max=0)


@pytest.mark.asyncio
async def test_retries_transport_errors_until_success(retry):
    func = AsyncMock(side_effect=[TransportError("a"), TransportError("b"), "ok"])

    assert await retry.execute(func, "arg") == "ok"
    assert func.await_count == 3
    func.assert_awaited_with("arg")


@pytest.mark.asyncio
async def test_reraises_last_error_when_attempts_exhausted(retry):
    func = AsyncMock(side_effect=TransportError("still down"))

    with pytest.raises(TransportError) as excinfo:
        await retry.execute(func)

    assert excinfo.value.message == "still down"
    assert func.await_count == 3


@pytest.mark.asyncio
async def test_protocol_errors_fail_immediately(retry):
    func = AsyncMock(side_effect=ProtocolError("bad status"))

    with pytest.raises(ProtocolError):
        await retry.execute(func)

    func.assert_awaited_once()


@pytest.mark.asyncio
async def test_call_time_overrides(retry):
    func = AsyncMock(side_effect=[ValueError("x"), "ok"])

    assert await retry.execute(func, attempts=2, exception_types=(ValueError,)) == "ok"


def test_from_app_settings():
    settings = CxSettings(
        CX_REQUEST_RETRY_ATTEMPTS=5,
        CX_REQUEST_RETRY_BASE_WAIT=0.1,
        CX_REQUEST_RETRY_MAX_WAIT=2.0,
    )
    adapter = TenacityRetryAdapter.from_app_settings(settings)
    assert (adapter.attempts, adapter.wait_initial, adapter.wait_max) == (5, 0.1, 2.0)
