# cxclient/core/interfaces/rest.py
from abc import ABC, abstractmethod
from typing import List

from cxclient.core.models.osa import (
    CVE,
    CreateOsaScanResponse,
    Library,
    OsaFile,
    OsaScanStatus,
    OsaSummaryResults,
)


class CxRestPort(ABC):
    """REST API operations used for OSA (dependency) scans.

    The REST session is cookie based: `login` drops any previous cookies and
    returns the anti-forgery token of the new session. All other operations
    raise `ProtocolError` when the server answers with an unexpected status.
    """

    @abstractmethod
    async def login(self) -> str:
        pass

    @abstractmethod
    async def create_osa_scan(self, project_id: int, files: List[OsaFile]) -> CreateOsaScanResponse:
        pass

    @abstractmethod
    async def get_osa_scan_status(self, scan_id: str) -> OsaScanStatus:
        pass

    @abstractmethod
    async def get_osa_scan_summary_results(self, scan_id: str) -> OsaSummaryResults:
        pass

    @abstractmethod
    async def get_osa_libraries(self, scan_id: str) -> List[Library]:
        pass

    @abstractmethod
    async def get_osa_vulnerabilities(self, scan_id: str) -> List[CVE]:
        pass
