"""Tests for PollingConfig and the settings driven policy factories."""

from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from cxclient.core.config import PollingConfig, TimeoutUnit
from cxclient.core.settings import CxSettings


@pytest.fixture
def settings():
    return CxSettings(
        CX_SERVER_URL="https://cx.example.test",
        CX_SCAN_POLL_INTERVAL=7,
        CX_REPORT_POLL_INTERVAL=1,
        CX_OSA_POLL_INTERVAL=3,
        CX_WAIT_FOR_SCAN_RETRY=4,
        CX_REPORT_TIMEOUT_SECONDS=120,
    )


def test_scan_policy_from_settings(settings):
    config = PollingConfig.for_scan(settings, timeout_minutes=15)
    assert config.interval == 7
    assert config.timeout == 15
    assert config.timeout_unit == TimeoutUnit.minutes
    assert config.retry_budget == 4
    assert not config.is_unbounded


def test_scan_policy_defaults_to_unbounded(settings):
    assert PollingConfig.for_scan(settings).is_unbounded


def test_report_policy_is_bounded_in_seconds(settings):
    config = PollingConfig.for_report(settings)
    assert config.timeout == 120
    assert config.timeout_unit == TimeoutUnit.seconds
    assert config.retry_budget is None
    assert not config.is_unbounded


def test_osa_policy_from_settings(settings):
    config = PollingConfig.for_osa_scan(settings, timeout_minutes=-1)
    assert config.interval == 3
    assert config.is_unbounded


def test_bounded_policy_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        PollingConfig(timeout=0, allow_unbounded=False)


def test_with_timeout_returns_new_config():
    config = PollingConfig(interval=1, timeout=0)
    bounded = config.with_timeout(5)
    assert bounded.timeout == 5
    assert config.timeout == 0


def test_config_is_frozen():
    config = PollingConfig()
    with pytest.raises(ValidationError):
        config.timeout = 3


def test_retry_budget_must_be_positive():
    with pytest.raises(ValidationError):
        PollingConfig(retry_budget=0)


def test_timeout_unit_seconds():
    assert TimeoutUnit.minutes.seconds_per_unit == 60
    assert TimeoutUnit.seconds.seconds_per_unit == 1


def test_server_url_is_normalized():
    settings = CxSettings(CX_SERVER_URL="https://cx.example.test///")
    assert settings.server_url == "https://cx.example.test"


def test_print_settings_hides_password(capsys):
    settings = CxSettings(CX_PASSWORD="top-secret")
    log = Mock()

    settings.print_settings(log)

    log.info.assert_called_once_with("Cx client settings:")
    out = capsys.readouterr().out
    assert "CX_SERVER_URL" in out
    assert "top-secret" not in out
