# cxclient/adapters/cx_rest_adapter.py
import json
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from cxclient.core.exceptions import AuthError, ProtocolError
from cxclient.core.interfaces.http_client import HttpClientPort
from cxclient.core.interfaces.rest import CxRestPort
from cxclient.core.models.osa import (
    CVE,
    CreateOsaScanRequest,
    CreateOsaScanResponse,
    Library,
    OsaFile,
    OsaScanStatus,
    OsaSummaryResults,
)
from cxclient.core.settings import logger

T = TypeVar("T")

ROOT_PATH = "CxRestAPI"
AUTHENTICATION_PATH = "auth/login"
OSA_SCAN_PROJECT_PATH = "osa/scans"
OSA_SCAN_STATUS_PATH = "osa/scans/{scan_id}"
OSA_SCAN_SUMMARY_PATH = "osa/reports"
OSA_SCAN_LIBRARIES_PATH = "osa/libraries"
OSA_SCAN_VULNERABILITIES_PATH = "osa/vulnerabilities"
CSRF_TOKEN_HEADER = "CXCSRFToken"
MAX_ITEMS = 1000000


class CxRestAdapter(CxRestPort):
    """REST binding of the OSA endpoints on top of an `HttpClientPort`.

    The cookie jar of the HTTP client carries the session; the anti-forgery
    token issued at login is echoed in the ``CXCSRFToken`` header.
    """

    def __init__(self, http_client: HttpClientPort, server_url: str, username: str, password: str):
        self._http = http_client
        self._root = server_url.rstrip("/") + "/" + ROOT_PATH + "/"
        self._username = username
        self._password = password
        self._csrf_token: Optional[str] = None

    def _url(self, path: str) -> str:
        return self._root + path

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json;v=1"}
        if self._csrf_token:
            headers[CSRF_TOKEN_HEADER] = self._csrf_token
        return headers

    async def login(self) -> str:
        self._http.clear_cookies()
        self._csrf_token = None
        resp = await self._http.post(
            self._url(AUTHENTICATION_PATH),
            json={"userName": self._username, "password": self._password},
            headers=self._headers(),
        )
        try:
            self._validate_response(resp, 200, "Failed to login")
        except ProtocolError as exc:
            raise AuthError(exc.message, diagnostic=exc.body) from exc

        self._csrf_token = self._http.get_cookie(CSRF_TOKEN_HEADER)
        logger.debug("[rest:login] logged in user=%s csrf=%s", self._username, bool(self._csrf_token))
        return self._csrf_token or ""

    async def create_osa_scan(self, project_id: int, files: List[OsaFile]) -> CreateOsaScanResponse:
        request = CreateOsaScanRequest(project_id=project_id, origin="Maven", hashed_files=files)
        resp = await self._http.post(
            self._url(OSA_SCAN_PROJECT_PATH),
            json=request.model_dump(by_alias=True),
            headers=self._headers(),
        )
        self._validate_response(resp, 202, "Failed to create OSA scan")
        return self._convert(resp, CreateOsaScanResponse)

    async def get_osa_scan_status(self, scan_id: str) -> OsaScanStatus:
        resp = await self._http.get(
            self._url(OSA_SCAN_STATUS_PATH.format(scan_id=scan_id)),
            headers=self._headers(),
        )
        self._validate_response(resp, 200, "Failed to get OSA scan status")
        return self._convert(resp, OsaScanStatus)

    async def get_osa_scan_summary_results(self, scan_id: str) -> OsaSummaryResults:
        resp = await self._http.get(
            self._url(OSA_SCAN_SUMMARY_PATH),
            params={"scanId": scan_id},
            headers=self._headers(),
        )
        self._validate_response(resp, 200, "Failed to get OSA scan summary results")
        return self._convert(resp, OsaSummaryResults)

    async def get_osa_libraries(self, scan_id: str) -> List[Library]:
        resp = await self._http.get(
            self._url(OSA_SCAN_LIBRARIES_PATH),
            params={"scanId": scan_id, "itemsPerPage": MAX_ITEMS},
            headers=self._headers(),
        )
        self._validate_response(resp, 200, "Failed to get OSA libraries")
        return self._convert(resp, List[Library])

    async def get_osa_vulnerabilities(self, scan_id: str) -> List[CVE]:
        resp = await self._http.get(
            self._url(OSA_SCAN_VULNERABILITIES_PATH),
            params={"scanId": scan_id, "itemsPerPage": MAX_ITEMS},
            headers=self._headers(),
        )
        self._validate_response(resp, 200, "Failed to get OSA vulnerabilities")
        return self._convert(resp, List[CVE])

    def _validate_response(self, resp: Dict[str, Any], expected_status: int, message: str) -> None:
        status = resp.get("status")
        if status == expected_status:
            return
        body = resp.get("body")
        body_text = body if isinstance(body, str) else json.dumps(body)
        # Flatten JSON error bodies into a single readable line
        cleaned = (
            body_text.replace("{", "").replace("}", "").replace("\n", " ").replace("  ", "")
        )
        raise ProtocolError(
            f"{message}: status code: {status}. error:{cleaned}",
            status_code=status,
            body=body_text,
        )

    def _convert(self, resp: Dict[str, Any], value_type: Type[T] | Any) -> T:
        body = resp.get("body")
        try:
            if isinstance(value_type, type) and issubclass(value_type, BaseModel):
                if isinstance(body, str):
                    return value_type.model_validate_json(body)
                return value_type.model_validate(body)
            adapter = TypeAdapter(value_type)
            if isinstance(body, str):
                return adapter.validate_json(body)
            return adapter.validate_python(body)
        except ValidationError as exc:
            logger.debug("Failed to parse JSON response: [%s] error=%s", body, exc)
            raise ProtocolError(
                f"Failed to parse JSON response: {exc.error_count()} validation error(s)",
                body=body if isinstance(body, str) else json.dumps(body),
                diagnostic=str(exc),
            ) from exc
