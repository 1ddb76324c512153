"""Tests for the ready-made wait handlers."""

import logging
import time

import pytest

from cxclient.core.managers.wait_handlers import LoggingWaitHandler, NullWaitHandler
from cxclient.core.models.job import JobHandle, JobKind, StatusSnapshot
from cxclient.core.models.sdk import CurrentStatus, ScanStatusResponse


@pytest.fixture
def scan_handle():
    return JobHandle(job_id="r1", kind=JobKind.scan)


@pytest.mark.asyncio
async def test_null_handler_accepts_every_event(scan_handle):
    handler = NullWaitHandler()
    snapshot = StatusSnapshot(handle=scan_handle, status="Working")

    await handler.on_start(0, 0)
    await handler.on_idle(snapshot)
    await handler.on_success(snapshot)
    await handler.on_fail(snapshot)
    await handler.on_timeout(None)
    await handler.on_cancel(None)


@pytest.mark.asyncio
async def test_logging_handler_reports_queue_position(scan_handle, caplog):
    handler = LoggingWaitHandler()
    payload = ScanStatusResponse(current_status=CurrentStatus.queued, queue_position=3)
    snapshot = StatusSnapshot(handle=scan_handle, status="Queued", payload=payload)

    with caplog.at_level(logging.INFO, logger="cxclient.core.managers.wait_handlers"):
        await handler.on_start(int(time.time() * 1000), 0)
        await handler.on_idle(snapshot)

    assert "Timeout: none" in caplog.text
    assert "Position in queue: 3" in caplog.text


@pytest.mark.asyncio
async def test_logging_handler_reports_stage_and_percent(scan_handle, caplog):
    handler = LoggingWaitHandler()
    payload = ScanStatusResponse(
        current_status=CurrentStatus.working, stage_name="Scanning", total_percent=45
    )
    snapshot = StatusSnapshot(handle=scan_handle, status="Working", payload=payload)

    with caplog.at_level(logging.INFO, logger="cxclient.core.managers.wait_handlers"):
        await handler.on_start(int(time.time() * 1000), 30)
        await handler.on_idle(snapshot)

    assert "Timeout: 30" in caplog.text
    assert "Stage: Scanning. 45% processed" in caplog.text


@pytest.mark.asyncio
async def test_logging_handler_osa_status_and_failure(caplog):
    handler = LoggingWaitHandler()
    snapshot = StatusSnapshot(
        handle=JobHandle(job_id="osa-1", kind=JobKind.osa_scan),
        status="Failed",
        state_id=3,
        failure_reason="No files",
    )

    with caplog.at_level(logging.INFO, logger="cxclient.core.managers.wait_handlers"):
        await handler.on_idle(snapshot)
        await handler.on_fail(snapshot)

    assert "Status: Failed" in caplog.text
    assert "osa_scan:osa-1 failed" in caplog.text
    assert "No files" in caplog.text


@pytest.mark.asyncio
async def test_logging_handler_timeout_and_cancel(caplog):
    handler = LoggingWaitHandler()

    with caplog.at_level(logging.INFO, logger="cxclient.core.managers.wait_handlers"):
        await handler.on_timeout(None)
        await handler.on_cancel(None)

    assert "Last status: none observed" in caplog.text
    assert "cancelled" in caplog.text
