# cxclient/core/interfaces/sdk.py
from abc import ABC, abstractmethod

from cxclient.core.models.sdk import (
    CliScanArgs,
    CreateReportResponse,
    GroupListResponse,
    LoginResponse,
    PresetListResponse,
    ProjectScannedDisplayDataResponse,
    ReportRequest,
    ReportStatusResponse,
    RunIdResponse,
    ScanReportResponse,
    ScanStatusResponse,
)


class CxSdkPort(ABC):
    """SDK web service operations.

    Implementations wrap the SOAP endpoint (``/cxwebinterface/sdk/CxSDKWebService.asmx``).
    They return the service envelope as-is (``is_successful=False`` is not an
    exception) and raise `TransportError` only when the call itself could not
    be completed.
    """

    @abstractmethod
    async def login(self, username: str, password: str) -> LoginResponse:
        pass

    @abstractmethod
    async def scan(self, session_id: str, args: CliScanArgs) -> RunIdResponse:
        pass

    @abstractmethod
    async def get_status_of_single_scan(self, session_id: str, run_id: str) -> ScanStatusResponse:
        pass

    @abstractmethod
    async def get_associated_groups_list(self, session_id: str) -> GroupListResponse:
        pass

    @abstractmethod
    async def get_preset_list(self, session_id: str) -> PresetListResponse:
        pass

    @abstractmethod
    async def get_project_scanned_display_data(self, session_id: str) -> ProjectScannedDisplayDataResponse:
        pass

    @abstractmethod
    async def create_scan_report(self, session_id: str, request: ReportRequest) -> CreateReportResponse:
        pass

    @abstractmethod
    async def get_scan_report_status(self, session_id: str, report_id: int) -> ReportStatusResponse:
        pass

    @abstractmethod
    async def get_scan_report(self, session_id: str, report_id: int) -> ScanReportResponse:
        pass
