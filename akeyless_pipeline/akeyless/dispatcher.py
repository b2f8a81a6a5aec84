"""Operation dispatch for the Akeyless API.

Each supported operation maps to exactly one ``POST``; the request models
in ``models`` own the endpoint and body, this module sends them and
normalizes failures.
"""

import logging
from typing import Any, Mapping, Union

import requests

from akeyless_pipeline.akeyless.exceptions import (
    AkeylessRemoteError,
    resolve_error_message,
)
from akeyless_pipeline.akeyless.models import (
    OperationRequest,
    TransportConfig,
    parse_operation,
)
from akeyless_pipeline.akeyless.transport import post_json

logger = logging.getLogger(__name__)


class OperationDispatcher:
    """Sends one operation request and returns the vendor payload unmodified."""

    def dispatch(
        self,
        request: Union[OperationRequest, Mapping[str, Any]],
        token: str,
        transport: TransportConfig,
    ) -> Any:
        """Perform a single operation call.

        Args:
            request: Operation request model, or a record mapping with an
                ``operation`` key and its parameters
            token: Freshly minted Akeyless token
            transport: HTTP settings for the call

        Returns:
            The response body exactly as returned by Akeyless

        Raises:
            AkeylessValidationError: If the operation is unknown or its
                parameters are invalid (no request is sent)
            AkeylessRemoteError: If the call fails
        """
        request = parse_operation(request)

        endpoint = request.endpoint
        body = request.to_body(token)
        logger.debug(f"Dispatching {request.operation} to {endpoint}")

        try:
            return post_json(transport, endpoint, body)
        except requests.RequestException as e:
            response = getattr(e, "response", None)
            status_code = response.status_code if response is not None else None
            message = resolve_error_message(e)
            logger.warning(
                f"Akeyless {request.operation} failed"
                f" (status={status_code}): {message}"
            )
            raise AkeylessRemoteError(
                message,
                endpoint=endpoint,
                status_code=status_code,
            ) from e
