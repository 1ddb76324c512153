"""PollingEngine: drives one remote job to exactly one terminal outcome.

One loop serves every job kind; the kind-specific parts are injected:

1. a status query (`JobHandle -> StatusSnapshot`), which raises
   `TransportError` / `ProtocolError` when the status could not be obtained;
2. a `StatusClassifier` mapping a snapshot to pending / succeeded / failed;
3. a `PollingConfig` (interval, timeout and its unit, retry budget).

Precedence inside one iteration: a Failed classification ends the session
immediately, Succeeded returns the snapshot, Pending keeps polling. Failed
status queries only consume the retry budget; any successful query resets it.
The deadline is checked before every iteration.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional

from cxclient.core.config import PollingConfig
from cxclient.core.exceptions import (
    JobCancelledError,
    JobFailedError,
    JobTimeoutError,
    ProtocolError,
    RetryBudgetExhaustedError,
    TransportError,
)
from cxclient.core.interfaces.status_classification import StatusClassifier
from cxclient.core.interfaces.wait_handler import ScanWaitHandler
from cxclient.core.logging_config import job_id_var
from cxclient.core.managers.wait_handlers import NullWaitHandler
from cxclient.core.models.job import (
    Classification,
    JobHandle,
    OutcomeKind,
    StatusSnapshot,
    TerminalOutcome,
)
from cxclient.core.settings import logger

StatusQuery = Callable[[JobHandle], Awaitable[StatusSnapshot]]


class RetryBudget:
    """Consecutive status query failures still tolerated in a session.

    `maximum=None` never runs out.
    """

    def __init__(self, maximum: Optional[int]):
        self.maximum = maximum
        self.remaining = maximum

    @property
    def is_unlimited(self) -> bool:
        return self.maximum is None

    def consume(self) -> bool:
        """Use one unit; return True when the budget is exhausted."""
        if self.remaining is None:
            return False
        self.remaining -= 1
        return self.remaining <= 0

    def reset(self) -> None:
        self.remaining = self.maximum


class PollingEngine:
    """Generic retry/timeout/polling loop.

    Attributes:
        clock: Wall-clock source in epoch seconds (injectable for tests)
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    async def run(
        self,
        handle: JobHandle,
        query: StatusQuery,
        classifier: StatusClassifier,
        config: PollingConfig,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StatusSnapshot:
        """Poll `handle` until it succeeds, fails, times out or is cancelled.

        Returns:
            The snapshot that was classified as succeeded.

        Raises:
            JobFailedError: the job reported a terminal failure status
            JobTimeoutError: the bounded deadline elapsed
            RetryBudgetExhaustedError: too many consecutive failed status queries
            JobCancelledError: `cancel_event` was set
        """
        token = job_id_var.set(handle.job_id)
        try:
            return await self._run(
                handle, query, classifier, config, handler or NullWaitHandler(), cancel_event
            )
        finally:
            job_id_var.reset(token)

    async def _run(
        self,
        handle: JobHandle,
        query: StatusQuery,
        classifier: StatusClassifier,
        config: PollingConfig,
        handler: ScanWaitHandler,
        cancel_event: Optional[asyncio.Event],
    ) -> StatusSnapshot:
        budget = RetryBudget(config.retry_budget)
        start_time = self._clock()
        deadline = self._to_units(start_time, config) + config.timeout
        last_snapshot: Optional[StatusSnapshot] = None

        await handler.on_start(int(start_time * 1000), config.timeout)
        logger.debug(
            "[poll:start] %s timeout=%s %s interval=%ss retry_budget=%s",
            handle,
            config.timeout,
            config.timeout_unit,
            config.interval,
            config.retry_budget,
        )

        while config.is_unbounded or self._to_units(self._clock(), config) <= deadline:
            if await self._wait_interval(config.interval, cancel_event):
                await self._cancel(handle, handler, last_snapshot)

            try:
                snapshot = await query(handle)
            except (TransportError, ProtocolError) as exc:
                self._consume_budget(handle, classifier, budget, exc, last_snapshot)
                continue

            budget.reset()
            last_snapshot = snapshot
            classification = classifier.classify(snapshot)

            if classification == Classification.failed:
                reason = classifier.failure_reason(snapshot)
                message = classifier.describe_failure(snapshot)
                outcome = TerminalOutcome(
                    kind=OutcomeKind.failed, handle=handle, snapshot=snapshot, reason=message
                )
                logger.warning("[poll:failed] %s status=%s reason=%s", handle, snapshot.status, reason)
                await handler.on_fail(snapshot)
                raise JobFailedError(
                    message,
                    job_id=handle.job_id,
                    status=snapshot.status,
                    reason=reason,
                    outcome=outcome,
                )

            if classification == Classification.succeeded:
                logger.debug("[poll:succeeded] %s status=%s", handle, snapshot.status)
                await handler.on_success(snapshot)
                return snapshot

            await handler.on_idle(snapshot)

        message = classifier.describe_timeout(handle, config)
        logger.warning("[poll:timeout] %s %s", handle, message)
        await handler.on_timeout(last_snapshot)
        raise JobTimeoutError(
            message,
            job_id=handle.job_id,
            timeout=config.timeout,
            unit=str(config.timeout_unit),
            last_status=last_snapshot.status if last_snapshot else None,
            outcome=TerminalOutcome(
                kind=OutcomeKind.timed_out, handle=handle, snapshot=last_snapshot, reason=message
            ),
        )

    @staticmethod
    def _to_units(timestamp: float, config: PollingConfig) -> int:
        # Integer division aligns the deadline to the job clock granularity
        return int(timestamp // config.timeout_unit.seconds_per_unit)

    @staticmethod
    async def _wait_interval(interval: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for `interval`; return True if cancellation was requested."""
        if cancel_event is None:
            await asyncio.sleep(interval)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return False
        return True

    def _consume_budget(
        self,
        handle: JobHandle,
        classifier: StatusClassifier,
        budget: RetryBudget,
        exc: Exception,
        last_snapshot: Optional[StatusSnapshot],
    ) -> None:
        if budget.is_unlimited:
            logger.warning(
                "Failed to get status from %s %s: %s", classifier.label.lower(), handle.job_id, exc
            )
            return

        exhausted = budget.consume()
        logger.debug(
            "Failed to get status from %s %s. Retrying (%s tries left). Error message: %s",
            classifier.label.lower(),
            handle.job_id,
            budget.remaining,
            exc,
        )
        if exhausted:
            error = RetryBudgetExhaustedError(job_id=handle.job_id, last_error=str(exc))
            error.outcome = TerminalOutcome(
                kind=OutcomeKind.failed,
                handle=handle,
                snapshot=last_snapshot,
                reason=error.message,
            )
            raise error from exc

    async def _cancel(
        self,
        handle: JobHandle,
        handler: ScanWaitHandler,
        last_snapshot: Optional[StatusSnapshot],
    ) -> None:
        logger.info("[poll:cancelled] %s", handle)
        await handler.on_cancel(last_snapshot)
        raise JobCancelledError(
            job_id=handle.job_id,
            outcome=TerminalOutcome(
                kind=OutcomeKind.cancelled, handle=handle, snapshot=last_snapshot
            ),
        )
