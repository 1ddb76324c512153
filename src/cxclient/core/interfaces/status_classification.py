"""Protocol for status classifiers.

A classifier maps one status observation of a remote job onto the three
states the polling engine understands, following the Strategy pattern:
one implementation per job kind.
"""

from typing import Optional, Protocol

from cxclient.core.config import PollingConfig
from cxclient.core.models.job import Classification, JobHandle, StatusSnapshot


class StatusClassifier(Protocol):
    """Protocol defining the interface for per-job-kind status classification.

    - ScanStatusClassifier: enumerated code scan status
    - ReportStatusClassifier: ready/failed flags of report generation
    - OsaStatusClassifier: OSA scan state id
    """

    label: str
    """Human readable name of the job kind, used in error messages."""

    def classify(self, snapshot: StatusSnapshot) -> Classification:
        """Classify a snapshot as pending, succeeded or failed.

        Failure must take precedence over success when both apply.
        """
        ...

    def failure_reason(self, snapshot: StatusSnapshot) -> Optional[str]:
        """Extract the server supplied failure reason, if any."""
        ...

    def describe_failure(self, snapshot: StatusSnapshot) -> str:
        """Render the fatal error message for a failed snapshot."""
        ...

    def describe_timeout(self, handle: JobHandle, config: PollingConfig) -> str:
        """Render the error message for a wait that ran past its deadline."""
        ...
