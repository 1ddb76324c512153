"""Configuration models for polling sessions.

Each polling session receives its own immutable `PollingConfig`; nothing is
read from process-wide mutable state while a session runs.
"""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class TimeoutUnit(StrEnum):
    minutes = "minutes"
    seconds = "seconds"

    @property
    def seconds_per_unit(self) -> int:
        return 60 if self is TimeoutUnit.minutes else 1


class PollingConfig(BaseModel):
    """Polling policy of one wait invocation.

    The deadline is aligned to the remote job's clock granularity: it is
    computed as ``floor(now / unit) + timeout`` and checked against
    ``floor(now / unit)``. A configured timeout of N minutes therefore lasts
    between N and N + 1 minutes of wall-clock time.

    Attributes:
        interval: Seconds to wait before every status query
        timeout: Timeout expressed in `timeout_unit`
        timeout_unit: Granularity of the deadline arithmetic
        allow_unbounded: When True a non-positive timeout means "no timeout";
            when False the timeout must be positive
        retry_budget: Consecutive failed status queries tolerated before the
            session fails (None = tolerate indefinitely, the deadline bounds it)
    """

    interval: float = Field(
        default=10.0,
        ge=0,
        description="Seconds between consecutive status queries"
    )

    timeout: int = Field(
        default=0,
        description="Timeout in timeout_unit (<= 0 means no timeout when allow_unbounded)"
    )

    timeout_unit: TimeoutUnit = TimeoutUnit.minutes

    allow_unbounded: bool = True

    retry_budget: Optional[int] = Field(
        default=5,
        ge=1,
        description="Maximum consecutive status query failures before giving up"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @model_validator(mode="after")
    def check_bounded_timeout(self) -> "PollingConfig":
        if not self.allow_unbounded and self.timeout <= 0:
            raise ValueError("timeout must be positive when allow_unbounded is False")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.allow_unbounded and self.timeout <= 0

    def with_timeout(self, timeout: int) -> "PollingConfig":
        """Return a copy with a different timeout (validated)."""
        return PollingConfig(**{**self.model_dump(), "timeout": timeout})

    @classmethod
    def for_scan(cls, settings, timeout_minutes: int = 0) -> "PollingConfig":
        """Code scan policy: minutes, unbounded when timeout <= 0."""
        return cls(
            interval=settings.CX_SCAN_POLL_INTERVAL,
            timeout=timeout_minutes,
            timeout_unit=TimeoutUnit.minutes,
            allow_unbounded=True,
            retry_budget=settings.CX_WAIT_FOR_SCAN_RETRY,
        )

    @classmethod
    def for_report(cls, settings) -> "PollingConfig":
        """Report generation policy: always bounded, in seconds.

        Unsuccessful status queries are only logged; the deadline ends the session.
        """
        return cls(
            interval=settings.CX_REPORT_POLL_INTERVAL,
            timeout=settings.CX_REPORT_TIMEOUT_SECONDS,
            timeout_unit=TimeoutUnit.seconds,
            allow_unbounded=False,
            retry_budget=None,
        )

    @classmethod
    def for_osa_scan(cls, settings, timeout_minutes: int = 0) -> "PollingConfig":
        """OSA scan policy: minutes, unbounded when timeout <= 0."""
        return cls(
            interval=settings.CX_OSA_POLL_INTERVAL,
            timeout=timeout_minutes,
            timeout_unit=TimeoutUnit.minutes,
            allow_unbounded=True,
            retry_budget=settings.CX_WAIT_FOR_SCAN_RETRY,
        )
