from typing import Optional

from pydantic import BaseModel, Field


class LocalScanConfiguration(BaseModel):
    """Parameters of a scan over locally zipped sources.

    `preset` is a preset name resolved by `create_local_scan_resolve_fields`;
    `preset_id` is sent as-is by `create_local_scan`.
    """

    project_name: str
    file_name: str
    zipped_sources: bytes
    preset: Optional[str] = None
    preset_id: int = 0
    group_id: Optional[str] = None
    description: Optional[str] = None
    folder_exclusions: Optional[str] = None
    file_exclusions: Optional[str] = None
    is_incremental: bool = False
    is_private_scan: bool = False
    comment: Optional[str] = None
    fail_preset_not_found: bool = False


class CreateScanResponse(BaseModel):
    project_id: int
    run_id: str


class ScanResults(BaseModel):
    project_id: int
    scan_id: int
    project_name: Optional[str] = None
    high_severity_results: int = Field(default=0, ge=0)
    medium_severity_results: int = Field(default=0, ge=0)
    low_severity_results: int = Field(default=0, ge=0)
    info_severity_results: int = Field(default=0, ge=0)
    total_results: int = Field(default=0, ge=0)
    lines_of_code: int = Field(default=0, ge=0)
