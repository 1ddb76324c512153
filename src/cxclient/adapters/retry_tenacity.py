from typing import Any, Awaitable, Callable, Sequence, Type

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cxclient.core.exceptions import TransportError
from cxclient.core.settings import logger


def _log_retry(name: str, state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    logger.warning(
        "[retry] %s failed (attempt %s), retrying in %.2fs: %s",
        name,
        state.attempt_number,
        state.next_action.sleep if state.next_action else 0.0,
        error,
    )


class TenacityRetryAdapter:
    """RetryPort for idempotent one-shot requests (login, listings, downloads).

    Exponential backoff between attempts; every retry is logged as a warning.
    Only `TransportError` is retried by default, so an unsuccessful envelope
    or an unexpected HTTP status fails on the first attempt. Call-time kwargs
    override the policy (attempts, wait_initial, wait_max, exception_types).
    """

    def __init__(
        self,
        attempts: int = 3,
        wait_initial: float = 0.5,
        wait_max: float = 5.0,
        exception_types: Sequence[Type[Exception]] = (TransportError,),
    ) -> None:
        self.attempts = attempts
        self.wait_initial = wait_initial
        self.wait_max = wait_max
        self.exception_types = tuple(exception_types)

    @classmethod
    def from_app_settings(cls, settings) -> "TenacityRetryAdapter":
        return cls(
            attempts=settings.CX_REQUEST_RETRY_ATTEMPTS,
            wait_initial=settings.CX_REQUEST_RETRY_BASE_WAIT,
            wait_max=settings.CX_REQUEST_RETRY_MAX_WAIT,
        )

    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        name = getattr(func, "__name__", "request")
        policy = {
            "attempts": kwargs.pop("attempts", self.attempts),
            "wait_initial": kwargs.pop("wait_initial", self.wait_initial),
            "wait_max": kwargs.pop("wait_max", self.wait_max),
            "exception_types": tuple(kwargs.pop("exception_types", self.exception_types)),
        }

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(policy["attempts"]),
            wait=wait_exponential(multiplier=policy["wait_initial"], max=policy["wait_max"]),
            retry=retry_if_exception_type(policy["exception_types"]),
            before_sleep=lambda state: _log_retry(name, state),
            reraise=True,
        ):
            with attempt:
                return await func(*args, **kwargs)
