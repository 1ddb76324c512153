"""Tests for SessionManager."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from cxclient.core.exceptions import AuthError
from cxclient.core.managers.session import SessionManager


def test_token_before_login_raises():
    session = SessionManager(AsyncMock(return_value="sid"), name="sdk")
    assert not session.is_authenticated
    with pytest.raises(AuthError) as excinfo:
        session.token
    assert "sdk" in excinfo.value.message


@pytest.mark.asyncio
async def test_refresh_replaces_token():
    authenticate = AsyncMock(side_effect=["sid-1", "sid-2"])
    session = SessionManager(authenticate)

    assert await session.refresh() == "sid-1"
    assert await session.refresh() == "sid-2"
    assert session.token == "sid-2"
    assert authenticate.await_count == 2


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_token():
    authenticate = AsyncMock(side_effect=["sid", AuthError("Failed to login: bad password")])
    session = SessionManager(authenticate)
    await session.refresh()

    with pytest.raises(AuthError):
        await session.refresh()

    assert session.is_authenticated
    assert session.token == "sid"


@pytest.mark.asyncio
async def test_token_stays_readable_while_refreshing():
    release = asyncio.Event()

    async def authenticate():
        await release.wait()
        return "sid-2"

    session = SessionManager(authenticate)
    session._token = "sid-1"

    refresh = asyncio.create_task(session.refresh())
    await asyncio.sleep(0)
    assert session.token == "sid-1"

    release.set()
    assert await refresh == "sid-2"
    assert session.token == "sid-2"


@pytest.mark.asyncio
async def test_concurrent_refreshes_are_serialized():
    active = 0
    max_active = 0

    async def authenticate():
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        await asyncio.sleep(0)
        active -= 1
        return "sid"

    session = SessionManager(authenticate)
    await asyncio.gather(*(session.refresh() for _ in range(5)))

    assert max_active == 1


def test_invalidate():
    session = SessionManager(AsyncMock(return_value="sid"))
    session._token = "sid"
    session.invalidate()
    assert not session.is_authenticated
