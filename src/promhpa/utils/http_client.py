import logging
from typing import Optional

import httpx

from ..core.config import config

logger = logging.getLogger(__name__)


def get_async_http_client(
    timeout: Optional[float] = None,
    verify: Optional[bool] = None,
) -> httpx.AsyncClient:
    """
    Returns a configured httpx.AsyncClient with:
    - The configured timeout (None disables it, which is the default).
    - TLS verification from PROMETHEUS_VERIFY_CERTS unless overridden.
    - Standard User-Agent header.
    """
    timeout = timeout if timeout is not None else config.PROMETHEUS_TIMEOUT
    verify = verify if verify is not None else config.PROMETHEUS_VERIFY_CERTS

    headers = {"User-Agent": config.USER_AGENT}
    if config.PROMETHEUS_BEARER_TOKEN:
        headers["Authorization"] = f"Bearer {config.PROMETHEUS_BEARER_TOKEN}"

    auth = None
    if config.PROMETHEUS_USERNAME and config.PROMETHEUS_PASSWORD:
        auth = (config.PROMETHEUS_USERNAME, config.PROMETHEUS_PASSWORD)

    logger.debug("Creating HTTP client (timeout=%s, verify=%s)", timeout, verify)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers=headers,
        auth=auth,
        verify=verify,
        follow_redirects=True,
    )
