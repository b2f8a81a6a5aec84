import logging
import time
from typing import Any, Iterable, Mapping

from dagster import ConfigurableResource, EnvVar
from pydantic import Field, ValidationError

from .akeyless import (
    AkeylessClient,
    AkeylessCredential,
    AkeylessError,
    AkeylessValidationError,
    OperationResult,
)
from .config import (
    AKEYLESS_URL, AKEYLESS_AUTH_METHOD, AKEYLESS_ALLOW_INSECURE_TLS, AKEYLESS_TIMEOUT_MS
)

logger = logging.getLogger(__name__)


class AkeylessResource(ConfigurableResource):
    """Akeyless credential shared by every op that talks to Akeyless"""
    url: str = Field(
        default=AKEYLESS_URL,
        description="Akeyless API base URL (e.g., 'https://api.akeyless.io')."
    )
    auth_method: str = Field(
        default=AKEYLESS_AUTH_METHOD,
        description="'accessKey' (Access ID + Access Key) or 'token' (t-token)."
    )
    access_id: str = Field(
        default=EnvVar("AKEYLESS_ACCESS_ID"),
        description="Akeyless Access ID (starts with 'p-')."
    )
    access_key: str = Field(
        default=EnvVar("AKEYLESS_ACCESS_KEY"),
        description="Akeyless Access Key."
    )
    token: str = Field(
        default=EnvVar("AKEYLESS_TOKEN"),
        description="Akeyless t-token. If set, Access ID and Access Key are not used."
    )
    allow_insecure_tls: bool = Field(
        default=AKEYLESS_ALLOW_INSECURE_TLS,
        description="Connect even if TLS certificate validation fails."
    )
    timeout_ms: int = Field(
        default=AKEYLESS_TIMEOUT_MS,
        gt=0,
        description="Default request timeout in milliseconds."
    )

    def credential(self) -> AkeylessCredential:
        try:
            return AkeylessCredential(
                url=self.url,
                auth_method=self.auth_method,
                access_id=self.access_id,
                access_key=self.access_key,
                token=self.token,
                allow_insecure_tls=self.allow_insecure_tls,
            )
        except ValidationError as e:
            raise AkeylessValidationError(
                "Invalid Akeyless resource configuration",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    def get_client(self) -> AkeylessClient:
        # A new client per call; nothing is cached between runs
        return AkeylessClient(self.credential(), timeout_ms=self.timeout_ms)

    def execute(self, record: Mapping[str, Any]) -> Any:
        return self.get_client().execute(record)

    def run_batch(
        self,
        records: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> list[OperationResult]:
        return self.get_client().run_batch(records, continue_on_fail=continue_on_fail)

    def health_check(self) -> dict[str, Any]:
        """Authenticate once and report the outcome; the token is discarded."""
        start_time = time.time()
        try:
            self.get_client().authenticate()
            error = None
        except AkeylessError as e:
            logger.error(f"Akeyless health check failed: {e}")
            error = str(e)

        latency_ms = (time.time() - start_time) * 1000
        return {
            "authenticated": error is None,
            "auth_method": self.auth_method,
            "latency_ms": round(latency_ms, 2),
            "error": error,
        }
