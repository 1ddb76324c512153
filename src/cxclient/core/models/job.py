from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime, timezone
from enum import StrEnum


class JobKind(StrEnum):
    scan = "scan"
    report = "report"
    osa_scan = "osa_scan"


class Classification(StrEnum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"


class OutcomeKind(StrEnum):
    succeeded = "succeeded"
    failed = "failed"
    timed_out = "timed_out"
    cancelled = "cancelled"


class JobHandle(BaseModel):
    """Identifier of a remote job as issued by the submission call."""

    job_id: str
    kind: JobKind

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.kind}:{self.job_id}"


class StatusSnapshot(BaseModel):
    """One observation of a remote job's status.

    Notes:
    - Produced anew on every poll and never mutated (frozen).
    - Code scans fill `status` from the status enum; reports fill `ready`/`failed`;
      OSA scans fill `state_id`, `status` (state name) and `failure_reason`.
    - `payload` keeps the typed server response so wait handlers can report
      progress details (stage, percentage, queue position).
    """

    handle: JobHandle
    status: Optional[str] = None
    state_id: Optional[int] = None
    ready: bool = False
    failed: bool = False
    message: Optional[str] = None
    failure_reason: Optional[str] = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload: Any = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class TerminalOutcome(BaseModel):
    """The single terminal result of a polling session."""

    kind: OutcomeKind
    handle: JobHandle
    snapshot: Optional[StatusSnapshot] = None
    reason: Optional[str] = None

    model_config = {"frozen": True}
