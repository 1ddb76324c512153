"""CxClientService: the public facade of the client.

Wraps the SDK and REST bindings, owns both sessions and delegates every wait
to the job waiters. One-shot idempotent reads go through the optional retry
port; submissions are sent exactly once.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional

from cxclient.core.config import PollingConfig
from cxclient.core.exceptions import AuthError, CxClientError, ProtocolError, TransportError
from cxclient.core.interfaces.http_client import HttpClientPort
from cxclient.core.interfaces.rest import CxRestPort
from cxclient.core.interfaces.sdk import CxSdkPort
from cxclient.core.interfaces.wait_handler import ScanWaitHandler
from cxclient.core.managers.job_waiters import OsaScanWaiter, ReportWaiter, ScanWaiter
from cxclient.core.managers.polling_engine import PollingEngine
from cxclient.core.managers.session import SessionManager
from cxclient.core.models.osa import (
    CVE,
    CreateOsaScanResponse,
    Library,
    OsaFile,
    OsaScanStatus,
    OsaSummaryResults,
)
from cxclient.core.models.scan import CreateScanResponse, LocalScanConfiguration, ScanResults
from cxclient.core.models.sdk import (
    CliScanArgs,
    LocalCodeContainer,
    ProjectScannedDisplayData,
    ProjectSettings,
    ReportRequest,
    ReportType,
    ScanStatusResponse,
    SourceCodeSettings,
    SourceFilterPatterns,
)
from cxclient.core.settings import logger

DEFAULT_PRESET_NAME = "Checkmarx Default"
SDK_PATH = "/cxwebinterface/sdk/CxSDKWebService.asmx"
SERVER_NOT_FOUND = "Fail to validate checkmarx server address"


class CxClientService:
    """Client of one scan server.

    Attributes:
        settings: Application settings (credentials, server address, polling policy)
    """

    def __init__(
        self,
        sdk: CxSdkPort,
        rest: CxRestPort,
        http_client: HttpClientPort,
        settings: Any,
        retry_port: Optional[Any] = None,  # RetryPort protocol
        engine: Optional[PollingEngine] = None,
    ) -> None:
        self._sdk = sdk
        self._rest = rest
        self._http = http_client
        self.settings = settings
        self._retry = retry_port
        engine = engine or PollingEngine()

        self._sdk_session = SessionManager(self._authenticate_sdk, name="sdk")
        self._rest_session = SessionManager(self._authenticate_rest, name="rest")

        self._scan_waiter = ScanWaiter(
            sdk, self._sdk_session, PollingConfig.for_scan(settings), engine
        )
        self._report_waiter = ReportWaiter(
            sdk, self._sdk_session, PollingConfig.for_report(settings), engine
        )
        self._osa_waiter = OsaScanWaiter(
            rest, self._rest_session, PollingConfig.for_osa_scan(settings), engine
        )

    async def __aenter__(self) -> "CxClientService":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _read(self, func: Callable[..., Awaitable[Any]], *args) -> Any:
        """Run an idempotent request, retrying transport failures when a retry port is set."""
        if self._retry:
            return await self._retry.execute(func, *args)
        return await func(*args)

    # Server & session

    async def check_server_connectivity(self) -> None:
        url = self.settings.server_url + SDK_PATH
        try:
            resp = await self._http.get(url)
        except TransportError as exc:
            logger.debug("%s: %s", SERVER_NOT_FOUND, url)
            raise CxClientError(
                f"{SERVER_NOT_FOUND}: {self.settings.server_url}, exception message: {exc.message}",
                diagnostic=exc.diagnostic,
            ) from exc
        if resp["status"] != 200:
            raise CxClientError(
                f"{SERVER_NOT_FOUND}: {self.settings.server_url}, response code: {resp['status']}"
            )

    async def _authenticate_sdk(self) -> str:
        res = await self._read(
            self._sdk.login,
            self.settings.CX_USERNAME,
            self.settings.CX_PASSWORD.get_secret_value(),
        )
        if not res.session_id:
            raise AuthError(f"Failed to login: {res.error_message}")
        return res.session_id

    async def _authenticate_rest(self) -> str:
        return await self._read(self._rest.login)

    async def login(self) -> None:
        await self._sdk_session.refresh()
        logger.info("Logged in to %s", self.settings.server_url)

    # Code scan

    async def create_local_scan(self, conf: LocalScanConfiguration) -> CreateScanResponse:
        filters = None
        if conf.folder_exclusions is not None or conf.file_exclusions is not None:
            filters = SourceFilterPatterns(
                exclude_files_patterns=conf.file_exclusions or "",
                exclude_folders_patterns=conf.folder_exclusions or "",
            )
        args = CliScanArgs(
            project_settings=ProjectSettings(
                project_name=conf.project_name,
                preset_id=conf.preset_id,
                associated_group_id=conf.group_id,
                description=conf.description,
            ),
            src_code_settings=SourceCodeSettings(
                packaged_code=LocalCodeContainer(
                    file_name=conf.file_name, zipped_file=conf.zipped_sources
                ),
                source_filter_lists=filters,
            ),
            is_incremental=conf.is_incremental,
            is_private_scan=conf.is_private_scan,
            comment=conf.comment,
        )

        logger.info("Sending scan request")
        resp = await self._sdk.scan(self._sdk_session.token, args)
        if not resp.is_successful:
            raise ProtocolError(f"Failed to perform scan: {resp.error_message}")

        logger.debug(
            "Create-scan returned with projectId: %s, runId: %s", resp.project_id, resp.run_id
        )
        return CreateScanResponse(project_id=resp.project_id, run_id=resp.run_id)

    async def create_local_scan_resolve_fields(
        self, conf: LocalScanConfiguration
    ) -> CreateScanResponse:
        """Resolve the preset name of `conf` to an id, then submit the scan."""
        if conf.preset is not None:
            default_preset_id = await self.resolve_preset_id_from_name(DEFAULT_PRESET_NAME)
            if conf.preset.lower() == DEFAULT_PRESET_NAME.lower():
                preset_id = default_preset_id
            else:
                preset_id = await self.resolve_preset_id_from_name(conf.preset)
                if preset_id == 0:
                    if conf.fail_preset_not_found:
                        raise CxClientError(f"Preset: [{conf.preset}], not found")
                    logger.warning("Preset [%s] not found. Preset set to default.", conf.preset)
                    preset_id = default_preset_id
            conf = conf.model_copy(update={"preset_id": preset_id})

        return await self.create_local_scan(conf)

    async def resolve_group_id_from_team_path(self, full_team_path: Optional[str]) -> Optional[str]:
        path = (full_team_path or "").strip().lower()
        resp = await self._read(self._sdk.get_associated_groups_list, self._sdk_session.token)
        if not resp.is_successful:
            logger.warning("Failed to retrieve group list: %s", resp.error_message)
            return None
        for group in resp.groups:
            if group.group_name.lower() == path:
                return group.id
        return None

    async def resolve_preset_id_from_name(self, preset_name: Optional[str]) -> int:
        name = (preset_name or "").strip().lower()
        resp = await self._read(self._sdk.get_preset_list, self._sdk_session.token)
        if not resp.is_successful:
            logger.warning("Failed to retrieve preset list: %s", resp.error_message)
            return 0
        for preset in resp.presets:
            if preset.preset_name.lower() == name:
                return preset.id
        return 0

    async def wait_for_scan_to_finish(
        self,
        run_id: str,
        timeout_minutes: int = 0,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ScanStatusResponse:
        """Block until the scan run finishes; `timeout_minutes <= 0` waits indefinitely."""
        snapshot = await self._scan_waiter.wait(
            run_id, timeout_minutes, handler=handler, cancel_event=cancel_event
        )
        return snapshot.payload

    async def retrieve_scan_results(self, project_id: int) -> ScanResults:
        resp = await self._read(self._sdk.get_project_scanned_display_data, self._sdk_session.token)
        if not resp.is_successful:
            raise ProtocolError(f"Failed to get scan data: {resp.error_message}")

        for project in resp.projects:
            if project.project_id == project_id:
                return self._to_scan_results(project)

        raise CxClientError(f"No scan data found for projectId [{project_id}]")

    @staticmethod
    def _to_scan_results(data: ProjectScannedDisplayData) -> ScanResults:
        return ScanResults(
            project_id=data.project_id,
            scan_id=data.last_scan_id,
            project_name=data.project_name,
            high_severity_results=data.high_vulnerabilities,
            medium_severity_results=data.medium_vulnerabilities,
            low_severity_results=data.low_vulnerabilities,
            info_severity_results=data.info_vulnerabilities,
            total_results=data.total_vulnerabilities,
            lines_of_code=data.loc,
        )

    async def get_scan_report(
        self,
        scan_id: int,
        report_type: ReportType = ReportType.PDF,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> bytes:
        """Generate a report of `scan_id`, wait for it and download it."""
        request = ReportRequest(scan_id=scan_id, type=report_type)
        created = await self._sdk.create_scan_report(self._sdk_session.token, request)
        if not created.is_successful:
            logger.warning("Failed to create scan report: %s", created.error_message)
            raise ProtocolError(f"Failed to create scan report: {created.error_message}")

        logger.debug("Waiting for server to generate %s report (reportId = %s)", report_type, created.id)
        await self._report_waiter.wait(created.id, cancel_event=cancel_event)

        report = await self._read(self._sdk.get_scan_report, self._sdk_session.token, created.id)
        if not report.is_successful:
            raise ProtocolError(
                f"Failed to retrieve scan report: {report.error_message}",
                job_id=str(created.id),
            )
        return report.scan_results

    # OSA scan

    async def create_osa_scan(self, project_id: int, files: List[OsaFile]) -> CreateOsaScanResponse:
        await self._rest_session.refresh()
        return await self._rest.create_osa_scan(project_id, files)

    async def wait_for_osa_scan_to_finish(
        self,
        scan_id: str,
        timeout_minutes: int = 0,
        handler: Optional[ScanWaitHandler] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> OsaScanStatus:
        snapshot = await self._osa_waiter.wait(
            scan_id, timeout_minutes, handler=handler, cancel_event=cancel_event
        )
        return snapshot.payload

    async def retrieve_osa_scan_summary_results(self, scan_id: str) -> OsaSummaryResults:
        return await self._read(self._rest.get_osa_scan_summary_results, scan_id)

    async def get_osa_libraries(self, scan_id: str) -> List[Library]:
        return await self._read(self._rest.get_osa_libraries, scan_id)

    async def get_osa_vulnerabilities(self, scan_id: str) -> List[CVE]:
        return await self._read(self._rest.get_osa_vulnerabilities, scan_id)

    async def close(self) -> None:
        self._sdk_session.invalidate()
        self._rest_session.invalidate()
        await self._http.close()
