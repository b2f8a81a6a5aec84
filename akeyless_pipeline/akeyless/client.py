"""AkeylessClient: authenticate-then-dispatch for Akeyless operations.

This module ties the authenticator and the dispatcher together and runs
batches of host records sequentially, one fresh token per record.
"""

import logging
import math
from typing import Any, Iterable, Mapping, Optional, Union

from akeyless_pipeline.akeyless.auth import Authenticator
from akeyless_pipeline.akeyless.dispatcher import OperationDispatcher
from akeyless_pipeline.akeyless.exceptions import (
    AkeylessError,
    AkeylessValidationError,
)
from akeyless_pipeline.akeyless.models import (
    AkeylessCredential,
    OperationKind,
    OperationRequest,
    OperationResult,
    TransportConfig,
    parse_operation,
)
from akeyless_pipeline.config import AKEYLESS_DEFAULT_TIMEOUT_MS

logger = logging.getLogger(__name__)


def request_timeout_ms(record: Any) -> Optional[float]:
    """Read the per-record HTTP timeout override, in milliseconds.

    The override lives in ``additionalFields.timeout``. A top-level
    ``timeout`` is accepted as well, except for dynamic secrets where that
    key is the vendor's own timeout in seconds. Fractional values are kept.
    """
    if not isinstance(record, Mapping):
        return None

    additional = record.get("additionalFields") or {}
    timeout = additional.get("timeout") if isinstance(additional, Mapping) else None
    if timeout is None and record.get("operation") != OperationKind.GET_DYNAMIC_SECRET.value:
        timeout = record.get("timeout")
    if timeout in (None, "", 0):
        return None

    try:
        timeout_ms = float(timeout)
    except (TypeError, ValueError) as e:
        raise AkeylessValidationError(f"Invalid timeout: {timeout!r}") from e
    if not math.isfinite(timeout_ms) or timeout_ms <= 0:
        raise AkeylessValidationError(f"Invalid timeout: {timeout!r}")
    return timeout_ms


class AkeylessClient:
    """Client for the Akeyless secrets-management REST API.

    No state is kept between calls besides configuration: every operation
    authenticates afresh, then performs exactly one request.

    Example:
        >>> credential = AkeylessCredential(access_id="p-123", access_key="...")
        >>> client = AkeylessClient(credential)
        >>> client.get_static_secret("/prod/db/password")
        {'/prod/db/password': '...'}
    """

    def __init__(
        self,
        credential: AkeylessCredential,
        timeout_ms: float = AKEYLESS_DEFAULT_TIMEOUT_MS,
        authenticator: Optional[Authenticator] = None,
        dispatcher: Optional[OperationDispatcher] = None,
    ):
        """Initialize the client.

        Args:
            credential: Credential used for every call
            timeout_ms: Default per-request timeout in milliseconds
            authenticator: Token source (default: Authenticator())
            dispatcher: Operation sender (default: OperationDispatcher())

        Raises:
            AkeylessValidationError: If timeout_ms is not a positive number
        """
        if not timeout_ms or timeout_ms <= 0:
            raise AkeylessValidationError(f"Invalid timeout: {timeout_ms!r}")
        self.credential = credential
        self.timeout_ms = timeout_ms
        self._authenticator = authenticator or Authenticator()
        self._dispatcher = dispatcher or OperationDispatcher()

    def transport(self, timeout_ms: Optional[float] = None) -> TransportConfig:
        """Build the HTTP settings for one call."""
        return TransportConfig.from_credential(
            self.credential, timeout_ms or self.timeout_ms
        )

    def authenticate(self, timeout_ms: Optional[float] = None) -> str:
        """Obtain a fresh token."""
        return self._authenticator.authenticate(
            self.credential, self.transport(timeout_ms)
        )

    def execute(
        self,
        request: Union[OperationRequest, Mapping[str, Any]],
        timeout_ms: Optional[float] = None,
    ) -> Any:
        """Authenticate, then perform one operation.

        Args:
            request: Operation request model or host record
            timeout_ms: Timeout override for both calls

        Returns:
            The vendor response body, unmodified

        Raises:
            AkeylessValidationError: If the request or credential is invalid
            AkeylessAuthenticationError: If no token could be obtained
            AkeylessRemoteError: If the operation call fails
        """
        # Parse first so an invalid record never triggers /auth
        request = parse_operation(request)
        transport = self.transport(timeout_ms)
        token = self._authenticator.authenticate(self.credential, transport)
        return self._dispatcher.dispatch(request, token, transport)

    def run_batch(
        self,
        records: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> list[OperationResult]:
        """Process host records sequentially, in order.

        Args:
            records: One mapping per input item, each with an ``operation``
                key and that operation's parameters
            continue_on_fail: Turn failures into error results and carry on
                instead of aborting the batch

        Returns:
            One result per record, tagged with the record's index

        Raises:
            AkeylessError: The first failure, when continue_on_fail is off
        """
        results: list[OperationResult] = []

        for index, record in enumerate(records):
            try:
                data = self.execute(record, timeout_ms=request_timeout_ms(record))
            except AkeylessError as e:
                if not continue_on_fail:
                    logger.error(f"Record {index} failed, aborting batch: {e}")
                    raise
                logger.warning(f"Record {index} failed, continuing: {e}")
                results.append(OperationResult(item=index, error=str(e)))
                continue

            results.append(OperationResult(item=index, data=data))

        logger.info(
            f"Processed {len(results)} Akeyless record(s), "
            f"{sum(1 for r in results if not r.ok)} failed"
        )
        return results

    # =====================================================================
    # Operation shortcuts
    # =====================================================================

    def get_static_secret(
        self,
        secret_name: str,
        accessibility: str = "regular",
        ignore_cache: bool = False,
    ) -> Any:
        return self.execute({
            "operation": OperationKind.GET_STATIC_SECRET.value,
            "secretName": secret_name,
            "accessibility": accessibility,
            "ignoreCache": ignore_cache,
        })

    def get_rotated_secret(self, secret_name: str, ignore_cache: bool = False) -> Any:
        return self.execute({
            "operation": OperationKind.GET_ROTATED_SECRET.value,
            "secretName": secret_name,
            "ignoreCache": ignore_cache,
        })

    def get_dynamic_secret(self, secret_name: str, timeout: int = 15) -> Any:
        """Fetch a dynamic secret; ``timeout`` is in seconds, vendor side."""
        return self.execute({
            "operation": OperationKind.GET_DYNAMIC_SECRET.value,
            "secretName": secret_name,
            "timeout": timeout,
        })

    def create_secret(
        self,
        secret_name: str,
        value: str = "",
        secret_type: str = "generic",
        format: str = "text",
        accessibility: str = "regular",
        username: str = "",
        password: str = "",
        secure_access_web_browsing: bool = False,
        secure_access_web_proxy: bool = False,
    ) -> Any:
        return self.execute({
            "operation": OperationKind.CREATE_SECRET.value,
            "secretName": secret_name,
            "secretValue": value,
            "secretType": secret_type,
            "format": format,
            "accessibility": accessibility,
            "username": username,
            "password": password,
            "secureAccessWebBrowsing": secure_access_web_browsing,
            "secureAccessWebProxy": secure_access_web_proxy,
        })

    def delete_items(self, path: str) -> Any:
        return self.execute({
            "operation": OperationKind.DELETE_ITEMS.value,
            "path": path,
        })

    def create_folder(self, folder_name: str, accessibility: str = "regular") -> Any:
        return self.execute({
            "operation": OperationKind.CREATE_FOLDER.value,
            "folderName": folder_name,
            "folderAccessibility": accessibility,
        })

    def delete_folder(self, folder_name: str, accessibility: str = "regular") -> Any:
        return self.execute({
            "operation": OperationKind.DELETE_FOLDER.value,
            "folderName": folder_name,
            "folderAccessibility": accessibility,
        })
