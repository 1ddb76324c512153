"""Concrete status classifiers, one per remote job kind.

1. ScanStatusClassifier: code scan, enumerated `CurrentStatus`
2. ReportStatusClassifier: report generation, ready/failed flags
3. OsaStatusClassifier: OSA scan, numeric state id

Every classifier checks for failure first: a failed observation is
authoritative even if the same snapshot also looks finished.
"""

from typing import Optional

from cxclient.core.config import PollingConfig
from cxclient.core.models.job import Classification, JobHandle, StatusSnapshot
from cxclient.core.models.osa import OsaScanStatusEnum
from cxclient.core.models.sdk import CurrentStatus


class ScanStatusClassifier:
    """Classifier for code scans polled through the SDK status call."""

    label = "Scan"

    FAILED_STATUSES = frozenset(
        status.value
        for status in (
            CurrentStatus.failed,
            CurrentStatus.canceled,
            CurrentStatus.deleted,
            CurrentStatus.unknown,
        )
    )
    SUCCEEDED_STATUS = CurrentStatus.finished.value

    def classify(self, snapshot: StatusSnapshot) -> Classification:
        if snapshot.status in self.FAILED_STATUSES:
            return Classification.failed
        if snapshot.status == self.SUCCEEDED_STATUS:
            return Classification.succeeded
        return Classification.pending

    def failure_reason(self, snapshot: StatusSnapshot) -> Optional[str]:
        return snapshot.failure_reason or snapshot.message

    def describe_failure(self, snapshot: StatusSnapshot) -> str:
        return f"Scan cannot be completed. Status [{snapshot.status}]."

    def describe_timeout(self, handle: JobHandle, config: PollingConfig) -> str:
        return (
            f"Scan {handle.job_id} has reached the time limit. "
            f"({config.timeout} {config.timeout_unit})."
        )


class ReportStatusClassifier:
    """Classifier for report generation.

    The flags are authoritative on first observation; there is no status
    history to reconcile.
    """

    label = "Report"

    def classify(self, snapshot: StatusSnapshot) -> Classification:
        if snapshot.failed:
            return Classification.failed
        if snapshot.ready:
            return Classification.succeeded
        return Classification.pending

    def failure_reason(self, snapshot: StatusSnapshot) -> Optional[str]:
        return snapshot.failure_reason

    def describe_failure(self, snapshot: StatusSnapshot) -> str:
        return f"Failed to generate scan report (reportId = {snapshot.handle.job_id})"

    def describe_timeout(self, handle: JobHandle, config: PollingConfig) -> str:
        return f"Failed to generate report (reportId = {handle.job_id}). Timeout"


class OsaStatusClassifier:
    """Classifier for OSA scans polled through the REST status endpoint."""

    label = "OSA scan"

    def classify(self, snapshot: StatusSnapshot) -> Classification:
        if snapshot.state_id == OsaScanStatusEnum.failed:
            return Classification.failed
        if snapshot.state_id == OsaScanStatusEnum.succeeded:
            return Classification.succeeded
        return Classification.pending

    def failure_reason(self, snapshot: StatusSnapshot) -> Optional[str]:
        return snapshot.failure_reason

    def describe_failure(self, snapshot: StatusSnapshot) -> str:
        reason = self.failure_reason(snapshot) or ""
        return f"OSA scan cannot be completed. Status: [{snapshot.status}]. Message: [{reason}]"

    def describe_timeout(self, handle: JobHandle, config: PollingConfig) -> str:
        return (
            f"OSA scan {handle.job_id} has reached the time limit. "
            f"({config.timeout} {config.timeout_unit})."
        )
