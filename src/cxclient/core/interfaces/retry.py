from typing import Protocol, Any, Awaitable, Callable

class RetryPort(Protocol):
    """Retry policy for idempotent one-shot requests.

    Used for login, lookups, result listings and report downloads. Submissions
    never go through it, and neither do polling sessions: those count
    consecutive failed status queries in their own retry budget.
    """
    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:  # pragma: no cover - protocol
        """Call `func(*args, **kwargs)`, retrying transient failures.

        Optional keyword overrides: attempts, wait_initial, wait_max,
        exception_types. The last exception propagates once attempts run out.
        """
        ...
