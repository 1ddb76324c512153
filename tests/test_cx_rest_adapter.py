"""Tests for the REST binding of the OSA endpoints.

The HTTP client is mocked so the tests assert on the exact URLs, headers and
payloads the adapter sends and on how it maps answers to models and errors.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from cxclient.adapters.cx_rest_adapter import CxRestAdapter
from cxclient.core.exceptions import AuthError, ProtocolError
from cxclient.core.interfaces.http_client import HttpClientPort
from cxclient.core.models.osa import OsaFile, OsaScanStatusEnum

ROOT = "https://cx.example.test/CxRestAPI/"


def _resp(status, body):
    return {"status": status, "headers": {}, "body": body}


@pytest.fixture
def http():
    client = Mock(spec=HttpClientPort)
    client.get = AsyncMock()
    client.post = AsyncMock()
    client.get_cookie = Mock(return_value="csrf-123")
    client.clear_cookies = Mock()
    return client


@pytest.fixture
def adapter(http):
    return CxRestAdapter(http, "https://cx.example.test/", "admin", "secret")


@pytest.mark.asyncio
async def test_login_posts_credentials_and_keeps_csrf_token(adapter, http):
    http.post.return_value = _resp(200, "")

    token = await adapter.login()

    assert token == "csrf-123"
    http.clear_cookies.assert_called_once()
    url = http.post.call_args.args[0]
    assert url == ROOT + "auth/login"
    assert http.post.call_args.kwargs["json"] == {"userName": "admin", "password": "secret"}
    http.get_cookie.assert_called_once_with("CXCSRFToken")


@pytest.mark.asyncio
async def test_login_rejected_raises_auth_error(adapter, http):
    http.post.return_value = _resp(400, {"messageDetails": "Invalid credentials"})

    with pytest.raises(AuthError) as excinfo:
        await adapter.login()

    assert excinfo.value.message.startswith("Failed to login: status code: 400.")
    assert "Invalid credentials" in excinfo.value.message


@pytest.mark.asyncio
async def test_requests_after_login_carry_csrf_header(adapter, http):
    http.post.return_value = _resp(200, "")
    await adapter.login()
    http.get.return_value = _resp(200, {"id": "s1", "state": {"id": 1, "name": "InProgress"}})

    await adapter.get_osa_scan_status("s1")

    headers = http.get.call_args.kwargs["headers"]
    assert headers["CXCSRFToken"] == "csrf-123"
    assert headers["Content-Type"] == "application/json;v=1"


@pytest.mark.asyncio
async def test_create_osa_scan_expects_accepted(adapter, http):
    http.post.return_value = _resp(202, {"scanId": "osa-1"})

    resp = await adapter.create_osa_scan(5, [OsaFile(name="lib.jar", sha1="abc")])

    assert resp.scan_id == "osa-1"
    url = http.post.call_args.args[0]
    assert url == ROOT + "osa/scans"
    assert http.post.call_args.kwargs["json"] == {
        "projectId": 5,
        "origin": "Maven",
        "hashedFiles": [{"name": "lib.jar", "sha1": "abc"}],
    }


@pytest.mark.asyncio
async def test_create_osa_scan_wrong_status_raises_protocol_error(adapter, http):
    http.post.return_value = _resp(200, {"scanId": "osa-1"})

    with pytest.raises(ProtocolError) as excinfo:
        await adapter.create_osa_scan(5, [])

    assert excinfo.value.status_code == 200
    assert excinfo.value.message.startswith("Failed to create OSA scan: status code: 200.")


@pytest.mark.asyncio
async def test_get_osa_scan_status_parses_state(adapter, http):
    http.get.return_value = _resp(
        200,
        {"id": "s1", "state": {"id": 3, "name": "Failed", "failureReason": "No files"}},
    )

    status = await adapter.get_osa_scan_status("s1")

    assert http.get.call_args.args[0] == ROOT + "osa/scans/s1"
    assert status.state.id == OsaScanStatusEnum.failed
    assert status.state.failure_reason == "No files"


@pytest.mark.asyncio
async def test_summary_results_use_scan_id_param(adapter, http):
    http.get.return_value = _resp(200, {"totalLibraries": 12, "highVulnerabilityLibraries": 2})

    summary = await adapter.get_osa_scan_summary_results("s1")

    assert http.get.call_args.args[0] == ROOT + "osa/reports"
    assert http.get.call_args.kwargs["params"] == {"scanId": "s1"}
    assert summary.total_libraries == 12
    assert summary.high_vulnerability_libraries == 2


@pytest.mark.asyncio
async def test_libraries_request_all_items(adapter, http):
    http.get.return_value = _resp(200, [{"id": "l1", "name": "commons-io", "version": "2.4"}])

    libraries = await adapter.get_osa_libraries("s1")

    assert http.get.call_args.kwargs["params"] == {"scanId": "s1", "itemsPerPage": 1000000}
    assert [lib.name for lib in libraries] == ["commons-io"]


@pytest.mark.asyncio
async def test_vulnerabilities_parse_severity(adapter, http):
    http.get.return_value = _resp(
        200,
        [{"id": "c1", "cveName": "CVE-2021-1", "score": 7.5, "severity": {"id": 2, "name": "High"}}],
    )

    cves = await adapter.get_osa_vulnerabilities("s1")

    assert http.get.call_args.args[0] == ROOT + "osa/vulnerabilities"
    assert cves[0].cve_name == "CVE-2021-1"
    assert cves[0].severity.name == "High"


@pytest.mark.asyncio
async def test_unparsable_body_raises_protocol_error(adapter, http):
    http.get.return_value = _resp(200, "<html>not json</html>")

    with pytest.raises(ProtocolError) as excinfo:
        await adapter.get_osa_scan_status("s1")

    assert excinfo.value.message.startswith("Failed to parse JSON response")
