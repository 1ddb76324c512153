"""Wait handler protocol for polling session lifecycle events.

Callers pass a handler to a wait operation to observe the job while it runs.
Events are awaited inline on the polling task, strictly in the order:

    on_start -> on_idle* -> exactly one of on_success / on_fail / on_timeout / on_cancel

A session that gives up because status queries kept failing raises without a
terminal event.
"""

from typing import Optional, Protocol

from cxclient.core.models.job import StatusSnapshot


class ScanWaitHandler(Protocol):
    """Observer protocol for a single polling session.

    Handlers must not assume re-entrancy or cross-thread delivery. An
    exception raised by a handler aborts the session and propagates to the
    caller.
    """

    async def on_start(self, start_time_millis: int, timeout: int) -> None:
        """Called once before the first poll.

        Args:
            start_time_millis: Session start as epoch milliseconds
            timeout: Configured timeout in the job kind's unit (<= 0 unbounded)
        """
        ...

    async def on_idle(self, snapshot: StatusSnapshot) -> None:
        """Called for every observed non-terminal status."""
        ...

    async def on_success(self, snapshot: StatusSnapshot) -> None:
        """Called once when the job finished successfully."""
        ...

    async def on_fail(self, snapshot: StatusSnapshot) -> None:
        """Called once, before the fatal error, when the job failed remotely."""
        ...

    async def on_timeout(self, snapshot: Optional[StatusSnapshot]) -> None:
        """Called once, before the timeout error, with the last observed status."""
        ...

    async def on_cancel(self, snapshot: Optional[StatusSnapshot]) -> None:
        """Called once when the caller cancelled the session."""
        ...
