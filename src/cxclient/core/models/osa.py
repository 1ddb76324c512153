"""OSA (dependency scan) REST payloads.

The REST API speaks camelCase JSON; models accept both the wire names and the
python field names.
"""

from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OsaScanStatusEnum(IntEnum):
    not_started = 0
    in_progress = 1
    succeeded = 2
    failed = 3


class OsaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class OsaFile(OsaModel):
    name: str
    sha1: str


class CreateOsaScanRequest(OsaModel):
    project_id: int
    origin: str = "Maven"
    hashed_files: List[OsaFile] = Field(default_factory=list)


class CreateOsaScanResponse(OsaModel):
    scan_id: str


class OsaScanState(OsaModel):
    id: int = 0
    name: Optional[str] = None
    failure_reason: Optional[str] = None


class OsaScanStatus(OsaModel):
    id: Optional[str] = None
    start_analyze_time: Optional[datetime] = None
    end_analyze_time: Optional[datetime] = None
    state: OsaScanState = Field(default_factory=OsaScanState)


class OsaSummaryResults(OsaModel):
    total_libraries: int = 0
    high_vulnerability_libraries: int = 0
    medium_vulnerability_libraries: int = 0
    low_vulnerability_libraries: int = 0
    non_vulnerable_libraries: int = 0
    vulnerable_and_updated: int = 0
    vulnerable_and_outdated: int = 0
    vulnerability_score: Optional[str] = None
    total_high_vulnerabilities: int = 0
    total_medium_vulnerabilities: int = 0
    total_low_vulnerabilities: int = 0


class Severity(OsaModel):
    id: int
    name: str


class Library(OsaModel):
    id: str
    name: str
    version: Optional[str] = None
    high_unique_vulnerability_count: int = 0
    medium_unique_vulnerability_count: int = 0
    low_unique_vulnerability_count: int = 0
    not_exploitable_vulnerability_count: int = 0
    newest_version: Optional[str] = None
    newest_version_release_date: Optional[str] = None
    number_of_versions_since_last_update: int = 0
    confidence_level: int = 0
    licenses: List[str] = Field(default_factory=list)


class CVE(OsaModel):
    id: str
    cve_name: Optional[str] = None
    score: float = 0.0
    severity: Optional[Severity] = None
    publish_date: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    recommendations: Optional[str] = None
    source_file_name: Optional[str] = None
    library_id: Optional[str] = None
