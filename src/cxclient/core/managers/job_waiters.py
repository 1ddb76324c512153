"""Job waiters: one thin wiring of the polling engine per remote job kind.

Each waiter binds the status query of its remote operation, converts the
raw response to a `StatusSnapshot`, and hands the engine its classifier and
polling config. Waiters hold no state of their own between invocations.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from cxclient.core.config import PollingConfig
from cxclient.core.exceptions import ProtocolError
from cxclient.core.interfaces.rest import CxRestPort
from cxclient.core.interfaces.sdk import CxSdkPort
from cxclient.core.interfaces.status_classification import StatusClassifier
from cxclient.core.interfaces.wait_handler import ScanWaitHandler
from cxclient.core.managers.polling_engine import PollingEngine
from cxclient.core.managers.session import SessionManager
from cxclient.core.managers.status_classifiers import (
    OsaStatusClassifier,
    ReportStatusClassifier,
    ScanStatusClassifier,
)
from cxclient.core.models.job import JobHandle, JobKind, StatusSnapshot
from cxclient.core.models.osa import OsaScanStatus
from cxclient.core.models.sdk import ReportStatusResponse, ScanStatusResponse
from cxclient.core.settings import logger


def snapshot_from_scan_status(handle: JobHandle, resp: ScanStatusResponse) -> StatusSnapshot:
    return StatusSnapshot(
        handle=handle,
        status=resp.current_status.value if resp.current_status else None,
        message=resp.stage_message or resp.step_message,
        failure_reason=resp.error_message,
        payload=resp,
    )


def snapshot_from_report_status(handle: JobHandle, resp: ReportStatusResponse) -> StatusSnapshot:
    if resp.is_failed:
        status = "Failed"
    elif resp.is_ready:
        status = "Ready"
    else:
        status = "InProgress"
    return StatusSnapshot(
        handle=handle,
        status=status,
        ready=resp.is_ready,
        failed=resp.is_failed,
        failure_reason=resp.error_message,
        payload=resp,
    )


def snapshot_from_osa_status(handle: JobHandle, resp: OsaScanStatus) -> StatusSnapshot:
    return StatusSnapshot(
        handle=handle,
        status=resp.state.name,
        state_id=resp.state.id,
        failure_reason=resp.state.failure_reason or None,
        payload=resp,
    )


class JobWaiter(ABC):
    """Base wiring shared by the three job kinds."""

    kind: JobKind
    classifier: StatusClassifier

    def __init__(self, config: PollingConfig, engine: Optional[PollingEngine] = None):
        self._config = config
        self._engine = engine or PollingEngine()

    @property
    def config(self) -> PollingConfig:
        return self._config

    @abstractmethod
    async def _query(self, handle: JobHandle) -> StatusSnapshot:
        """Fetch one status snapshot; raise TransportError/ProtocolError on failure."""

    async def _poll(
        self,
        job_id: str,
        config: PollingConfig,
        handler: Optional[ScanWaitHandler],
        cancel_event: Optional[asyncio.Event],
    ) -> StatusSnapshot:
        handle = JobHandle(job_id=job_id, kind=self.kind)
        return await self._engine.run(
            handle,
            self._query,
            self.classifier,
            config,
            handler=handler,
            cancel_event=cancel_event,
        )


class ScanWaiter(JobWaiter):
    """Waits for a code scan run submitted through the SDK."""

    kind = JobKind.scan
    classifier = ScanStatusClassifier()

    def __init__(
        self,
        sdk: CxSdkPort,
        session: SessionManager,
        config: PollingConfig,
        engine: Optional[PollingEngine] = None,
    ):
        super().__init__(config, engine)
        self._sdk = sdk
        self._session = session

    async def wait(
        self,
        run_id: str,
        timeout_minutes: int = 0,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StatusSnapshot:
        config = self._config.with_timeout(timeout_minutes)
        return await self._poll(run_id, config, handler, cancel_event)

    async def _query(self, handle: JobHandle) -> StatusSnapshot:
        resp = await self._sdk.get_status_of_single_scan(self._session.token, handle.job_id)
        if not resp.is_successful:
            raise ProtocolError(
                f"Failed to get scan status: {resp.error_message}",
                job_id=handle.job_id,
            )
        return snapshot_from_scan_status(handle, resp)


class ReportWaiter(JobWaiter):
    """Waits for report generation. Always bounded by the report timeout."""

    kind = JobKind.report
    classifier = ReportStatusClassifier()

    def __init__(
        self,
        sdk: CxSdkPort,
        session: SessionManager,
        config: PollingConfig,
        engine: Optional[PollingEngine] = None,
    ):
        super().__init__(config, engine)
        self._sdk = sdk
        self._session = session

    async def wait(
        self,
        report_id: int,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StatusSnapshot:
        return await self._poll(str(report_id), self._config, handler, cancel_event)

    async def _query(self, handle: JobHandle) -> StatusSnapshot:
        resp = await self._sdk.get_scan_report_status(self._session.token, int(handle.job_id))
        if not resp.is_successful:
            if resp.is_failed or resp.is_ready:
                # The flags of an unsuccessful response are still authoritative
                logger.warning(
                    "Failed to get status from scan report %s: %s", handle.job_id, resp.error_message
                )
                return snapshot_from_report_status(handle, resp)
            raise ProtocolError(
                f"Failed to get status from scan report: {resp.error_message}",
                job_id=handle.job_id,
            )
        return snapshot_from_report_status(handle, resp)


class OsaScanWaiter(JobWaiter):
    """Waits for an OSA scan. Refreshes the REST session before polling."""

    kind = JobKind.osa_scan
    classifier = OsaStatusClassifier()

    def __init__(
        self,
        rest: CxRestPort,
        session: SessionManager,
        config: PollingConfig,
        engine: Optional[PollingEngine] = None,
    ):
        super().__init__(config, engine)
        self._rest = rest
        self._session = session

    async def wait(
        self,
        scan_id: str,
        timeout_minutes: int = 0,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StatusSnapshot:
        # The session may have expired since the scan was submitted
        await self._session.refresh()
        config = self._config.with_timeout(timeout_minutes)
        return await self._poll(scan_id, config, handler, cancel_event)

    async def _query(self, handle: JobHandle) -> StatusSnapshot:
        resp = await self._rest.get_osa_scan_status(handle.job_id)
        return snapshot_from_osa_status(handle, resp)
