# Logging adapter for application-wide logging
from cxclient.adapters.logging_adapter import LoggingAdapter

from pydantic import HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings
from rich import print

from cxclient.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class CxSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    CX_LOG_LEVEL: str = "INFO"
    CX_SERVER_URL: HttpUrl = HttpUrl("http://localhost/")
    CX_USERNAME: str = "admin"
    CX_PASSWORD: SecretStr = SecretStr("admin")
    CX_VERIFY_SSL: bool = True
    # seconds, applied per HTTP request
    CX_REQUEST_TIMEOUT: float = 60.0
    CX_SCAN_POLL_INTERVAL: float = 10.0
    CX_REPORT_POLL_INTERVAL: float = 2.0
    CX_OSA_POLL_INTERVAL: float = 10.0
    # consecutive failed status queries tolerated while waiting for a scan
    CX_WAIT_FOR_SCAN_RETRY: int = 5
    CX_REPORT_TIMEOUT_SECONDS: int = 500
    # retries of idempotent one-shot requests on connection errors
    CX_REQUEST_RETRY_ATTEMPTS: int = 3
    CX_REQUEST_RETRY_BASE_WAIT: float = 0.5
    CX_REQUEST_RETRY_MAX_WAIT: float = 5.0

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Cx client settings:")
        print(self)

    @field_validator("CX_SERVER_URL", mode="before")
    def strip_trailing_slash(cls, value):
        """Normalize CX_SERVER_URL so paths can be appended with a single slash."""
        return str(value).rstrip("/") + "/"

    @property
    def server_url(self) -> str:
        return str(self.CX_SERVER_URL).rstrip("/")


app_settings = CxSettings()

logger: LoggingPort = LoggingAdapter("cxclient", app_settings.CX_LOG_LEVEL)
