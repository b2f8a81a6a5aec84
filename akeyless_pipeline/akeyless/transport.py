"""HTTP transport for the Akeyless REST API.

Every call is a single JSON ``POST`` made with the settings of an explicit
``TransportConfig``; nothing here changes process-wide state.
"""

import logging
import warnings
from typing import Any

import requests
from urllib3.exceptions import InsecureRequestWarning

from akeyless_pipeline.akeyless.models import TransportConfig

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "accept": "application/json",
    "Content-Type": "application/json",
}


def post_json(
    transport: TransportConfig,
    endpoint: str,
    body: dict[str, Any],
) -> Any:
    """POST ``body`` to ``{base_url}{endpoint}`` and decode the response.

    Args:
        transport: Base URL, TLS and timeout settings for this call
        endpoint: API path, e.g. "/get-secret-value"
        body: JSON request body (logged never, it carries the token)

    Returns:
        Decoded JSON response, or the raw text if the body is not JSON

    Raises:
        requests.RequestException: On transport failure or non-2xx status
    """
    url = f"{transport.base_url}{endpoint}"
    logger.debug(f"POST {url} (timeout={transport.timeout_ms}ms, verify={transport.verify})")

    with warnings.catch_warnings():
        if not transport.verify:
            warnings.simplefilter("ignore", InsecureRequestWarning)
        response = requests.post(
            url,
            json=body,
            headers=JSON_HEADERS,
            timeout=transport.timeout_seconds,
            verify=transport.verify,
        )

    logger.debug(f"POST {url} -> {response.status_code}")
    response.raise_for_status()

    try:
        return response.json()
    except ValueError:
        return response.text
