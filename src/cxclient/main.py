# main.py
from typing import Optional

from cxclient.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from cxclient.adapters.cx_rest_adapter import CxRestAdapter
from cxclient.adapters.retry_tenacity import TenacityRetryAdapter
from cxclient.core.interfaces.http_client import HttpClientPort
from cxclient.core.interfaces.sdk import CxSdkPort
from cxclient.core.logging_config import configure_logging
from cxclient.core.managers.client_service import CxClientService
from cxclient.core.settings import CxSettings, app_settings, logger


# main lives at the outermost layer (not in core)
# Instantiates the concrete adapters and wires them into the service.
# The SDK binding is supplied by the caller.

def create_client_service(
    sdk: CxSdkPort,
    settings: Optional[CxSettings] = None,
    http_client: Optional[HttpClientPort] = None,
    configure_logs: bool = True,
) -> CxClientService:
    settings = settings or app_settings

    if configure_logs:
        configure_logging(settings.CX_LOG_LEVEL)

    http_client = http_client or AioHttpClientAdapter(
        verify_ssl=settings.CX_VERIFY_SSL,
        default_timeout=settings.CX_REQUEST_TIMEOUT,
    )
    rest = CxRestAdapter(
        http_client,
        settings.server_url,
        settings.CX_USERNAME,
        settings.CX_PASSWORD.get_secret_value(),
    )
    retry_adapter = TenacityRetryAdapter.from_app_settings(settings)

    logger.debug("Creating client for %s", settings.server_url)
    return CxClientService(
        sdk=sdk,
        rest=rest,
        http_client=http_client,
        settings=settings,
        retry_port=retry_adapter,
    )
