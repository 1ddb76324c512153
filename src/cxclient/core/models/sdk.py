"""Typed request/response shapes of the SDK web service.

The SOAP binding is not part of this package; any implementation of
`CxSdkPort` translates its wire payloads into these models. Every response
carries the service envelope (`is_successful`, `error_message`).
"""

from datetime import datetime
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, Field


class CurrentStatus(StrEnum):
    queued = "Queued"
    working = "Working"
    unzipping = "Unzipping"
    waiting_to_process = "WaitingToProcess"
    finished = "Finished"
    failed = "Failed"
    canceled = "Canceled"
    deleted = "Deleted"
    unknown = "Unknown"


class ReportType(StrEnum):
    PDF = "PDF"
    RTF = "RTF"
    CSV = "CSV"
    XML = "XML"


class SdkResponse(BaseModel):
    is_successful: bool = True
    error_message: Optional[str] = None


class LoginResponse(SdkResponse):
    session_id: Optional[str] = None


class RunIdResponse(SdkResponse):
    project_id: int = 0
    run_id: Optional[str] = None


class ScanStatusResponse(SdkResponse):
    run_id: Optional[str] = None
    project_id: int = 0
    current_status: Optional[CurrentStatus] = None
    stage_name: Optional[str] = None
    stage_message: Optional[str] = None
    step_message: Optional[str] = None
    total_percent: int = Field(default=0, ge=0, le=100)
    current_stage_percent: int = Field(default=0, ge=0, le=100)
    queue_position: int = 0
    time_started: Optional[datetime] = None


class Group(BaseModel):
    id: str
    group_name: str


class GroupListResponse(SdkResponse):
    groups: List[Group] = Field(default_factory=list)


class Preset(BaseModel):
    id: int
    preset_name: str


class PresetListResponse(SdkResponse):
    presets: List[Preset] = Field(default_factory=list)


class ProjectScannedDisplayData(BaseModel):
    project_id: int
    project_name: Optional[str] = None
    team_name: Optional[str] = None
    last_scan_id: int = 0
    last_scan_date: Optional[datetime] = None
    total_vulnerabilities: int = 0
    high_vulnerabilities: int = 0
    medium_vulnerabilities: int = 0
    low_vulnerabilities: int = 0
    info_vulnerabilities: int = 0
    loc: int = 0


class ProjectScannedDisplayDataResponse(SdkResponse):
    projects: List[ProjectScannedDisplayData] = Field(default_factory=list)


class ReportRequest(BaseModel):
    scan_id: int
    type: ReportType = ReportType.PDF


class CreateReportResponse(SdkResponse):
    id: int = 0


class ReportStatusResponse(SdkResponse):
    is_ready: bool = False
    is_failed: bool = False


class ScanReportResponse(SdkResponse):
    scan_results: bytes = b""
    contain_all_results: bool = True


# Scan submission arguments

class SourceFilterPatterns(BaseModel):
    exclude_files_patterns: str = ""
    exclude_folders_patterns: str = ""


class LocalCodeContainer(BaseModel):
    file_name: str
    zipped_file: bytes


class SourceCodeSettings(BaseModel):
    source_origin: str = "Local"
    packaged_code: LocalCodeContainer
    source_filter_lists: Optional[SourceFilterPatterns] = None


class ProjectSettings(BaseModel):
    project_name: str
    preset_id: int = 0
    associated_group_id: Optional[str] = None
    description: Optional[str] = None


class CliScanArgs(BaseModel):
    project_settings: ProjectSettings
    src_code_settings: SourceCodeSettings
    is_incremental: bool = False
    is_private_scan: bool = False
    comment: Optional[str] = None
