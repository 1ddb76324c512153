"""Concrete wait handlers for polling sessions.

This module provides ready-made handlers:
- NullWaitHandler: ignores every event (used when the caller passes none)
- LoggingWaitHandler: reports progress of scans, reports and OSA scans to the log
"""

import logging
import time
from typing import Optional

from cxclient.core.models.job import JobKind, StatusSnapshot
from cxclient.core.models.sdk import ScanStatusResponse


logger = logging.getLogger(__name__)


class NullWaitHandler:
    """Handler that ignores all lifecycle events."""

    async def on_start(self, start_time_millis: int, timeout: int) -> None:
        pass

    async def on_idle(self, snapshot: StatusSnapshot) -> None:
        pass

    async def on_success(self, snapshot: StatusSnapshot) -> None:
        pass

    async def on_fail(self, snapshot: StatusSnapshot) -> None:
        pass

    async def on_timeout(self, snapshot: Optional[StatusSnapshot]) -> None:
        pass

    async def on_cancel(self, snapshot: Optional[StatusSnapshot]) -> None:
        pass


class LoggingWaitHandler:
    """Logs the progress of a polling session.

    Code scans log stage and percentage (or queue position while queued);
    other job kinds log their status name. Elapsed time is measured from
    `on_start`.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger
        self._start_time_millis: Optional[int] = None

    def _elapsed(self) -> str:
        if self._start_time_millis is None:
            return "0:00:00"
        seconds = max(0, int(time.time() - self._start_time_millis / 1000))
        hours, rest = divmod(seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours}:{minutes:02d}:{seconds:02d}"

    async def on_start(self, start_time_millis: int, timeout: int) -> None:
        self._start_time_millis = start_time_millis
        if timeout <= 0:
            self._log.info("Waiting for results. Timeout: none")
        else:
            self._log.info("Waiting for results. Timeout: %s", timeout)

    async def on_idle(self, snapshot: StatusSnapshot) -> None:
        self._log.info("Waiting for results. Elapsed time: %s. %s", self._elapsed(), self._describe(snapshot))

    async def on_success(self, snapshot: StatusSnapshot) -> None:
        self._log.info("%s finished successfully (%s)", snapshot.handle, self._elapsed())

    async def on_fail(self, snapshot: StatusSnapshot) -> None:
        reason = snapshot.failure_reason or snapshot.message or ""
        self._log.error("%s failed. Status: %s %s", snapshot.handle, snapshot.status, reason)

    async def on_timeout(self, snapshot: Optional[StatusSnapshot]) -> None:
        last = snapshot.status if snapshot else "none observed"
        self._log.error("Waiting has reached the time limit. Last status: %s", last)

    async def on_cancel(self, snapshot: Optional[StatusSnapshot]) -> None:
        self._log.warning("Waiting was cancelled after %s", self._elapsed())

    @staticmethod
    def _describe(snapshot: StatusSnapshot) -> str:
        payload = snapshot.payload
        if snapshot.handle.kind == JobKind.scan and isinstance(payload, ScanStatusResponse):
            if payload.queue_position > 0:
                return f"Status: {snapshot.status}. Position in queue: {payload.queue_position}"
            return (
                f"Stage: {payload.stage_name or snapshot.status}. "
                f"{payload.total_percent}% processed"
            )
        return f"Status: {snapshot.status}"
