from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from cxclient.core.models.job import TerminalOutcome


class CxClientError(Exception):
    """Base exception for all client failures.

    Attributes:
        message: Human-readable error description
        diagnostic: Technical diagnostic information for debugging
        job_id: Optional remote job identifier (run id, report id, OSA scan id)
    """
    def __init__(
        self,
        message: str,
        diagnostic: Optional[str] = None,
        job_id: Optional[str] = None
    ):
        self.message = message
        self.diagnostic = diagnostic
        self.job_id = job_id
        super().__init__(message)


class AuthError(CxClientError):
    """Raised when the server rejects the credentials or login cannot complete."""


class TransportError(CxClientError):
    """Raised on network/connectivity failure or request timeout.

    Retryable: inside a polling session it consumes one unit of the retry budget.
    """


class ProtocolError(CxClientError):
    """Raised when the remote endpoint answered with an unsuccessful envelope.

    Attributes:
        status_code: HTTP status code from the server (if applicable)
        body: Response body from the server (if available)
    """
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        diagnostic: Optional[str] = None,
        job_id: Optional[str] = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message=message, diagnostic=diagnostic, job_id=job_id)


# Polling session outcomes

class JobWaitError(CxClientError):
    """Base exception for fatal polling session outcomes.

    Attributes:
        outcome: The terminal outcome of the session that raised this error
    """
    def __init__(
        self,
        message: str,
        outcome: Optional["TerminalOutcome"] = None,
        diagnostic: Optional[str] = None,
        job_id: Optional[str] = None
    ):
        self.outcome = outcome
        super().__init__(message=message, diagnostic=diagnostic, job_id=job_id)


class JobFailedError(JobWaitError):
    """Raised when the remote job reports a terminal failure status.

    Attributes:
        status: Terminal status reported by the server
        reason: Failure reason reported by the server (if any)
    """
    def __init__(
        self,
        message: str,
        job_id: str,
        status: Optional[str] = None,
        reason: Optional[str] = None,
        outcome: Optional["TerminalOutcome"] = None,
    ):
        self.status = status
        self.reason = reason
        super().__init__(message=message, outcome=outcome, diagnostic=reason, job_id=job_id)


class JobTimeoutError(JobWaitError):
    """Raised when the job does not finish within the configured timeout.

    Attributes:
        timeout: Configured timeout value
        unit: Unit of the configured timeout ("minutes" or "seconds")
        last_status: Last status observed before the deadline (if any)
    """
    def __init__(
        self,
        message: str,
        job_id: str,
        timeout: int,
        unit: str,
        last_status: Optional[str] = None,
        outcome: Optional["TerminalOutcome"] = None,
    ):
        self.timeout = timeout
        self.unit = unit
        self.last_status = last_status
        super().__init__(message=message, outcome=outcome, job_id=job_id)


class RetryBudgetExhaustedError(JobWaitError):
    """Raised when consecutive status query failures exhaust the retry budget.

    Attributes:
        last_error: Message of the last transport/protocol error
    """
    def __init__(
        self,
        job_id: str,
        last_error: str,
        outcome: Optional["TerminalOutcome"] = None,
    ):
        self.last_error = last_error
        message = f"Failed to get status from job {job_id}. Error message: {last_error}"
        super().__init__(message=message, outcome=outcome, diagnostic=last_error, job_id=job_id)


class JobCancelledError(JobWaitError):
    """Raised when the caller requested cancellation of a polling session."""
    def __init__(
        self,
        job_id: str,
        outcome: Optional["TerminalOutcome"] = None,
    ):
        message = f"Waiting for job {job_id} was cancelled"
        super().__init__(message=message, outcome=outcome, job_id=job_id)
