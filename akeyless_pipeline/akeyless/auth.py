"""Token acquisition for the Akeyless API."""

import logging
from typing import Optional

import requests

from akeyless_pipeline.akeyless.exceptions import (
    AkeylessAuthenticationError,
    resolve_error_message,
)
from akeyless_pipeline.akeyless.models import AkeylessCredential, TransportConfig
from akeyless_pipeline.akeyless.transport import post_json
from akeyless_pipeline.config import (
    AKEYLESS_AUTH_ACCESS_TYPE,
    AKEYLESS_AUTH_GCP_AUDIENCE,
    AKEYLESS_AUTH_OCI_AUTH_TYPE,
)

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "/auth"


class Authenticator:
    """Produces a bearer token for one dispatched operation.

    Tokens are never cached: every call to ``authenticate`` either returns
    the configured t-token or performs a fresh ``/auth`` exchange.
    """

    def authenticate(
        self,
        credential: AkeylessCredential,
        transport: Optional[TransportConfig] = None,
    ) -> str:
        """Return a token for ``credential``.

        Args:
            credential: Credential record
            transport: HTTP settings for the /auth call (default: derived
                from the credential)

        Returns:
            Akeyless token

        Raises:
            AkeylessValidationError: If required credential fields are empty
            AkeylessAuthenticationError: If Akeyless does not return a token
        """
        token = credential.token.get_secret_value()
        if token:
            logger.debug("Using configured t-token, skipping /auth")
            return token

        credential.check_credentials()

        transport = transport or TransportConfig.from_credential(credential)
        body = {
            "access-type": AKEYLESS_AUTH_ACCESS_TYPE,
            "gcp-audience": AKEYLESS_AUTH_GCP_AUDIENCE,
            "json": False,
            "oci-auth-type": AKEYLESS_AUTH_OCI_AUTH_TYPE,
            "access-id": credential.access_id.strip(),
            "access-key": credential.access_key.get_secret_value().strip(),
        }

        try:
            response = post_json(transport, AUTH_ENDPOINT, body)
        except requests.RequestException as e:
            message = resolve_error_message(e)
            logger.warning(f"Akeyless authentication failed: {message}")
            raise AkeylessAuthenticationError(message) from e

        token = response.get("token") if isinstance(response, dict) else None
        if not token:
            keys = list(response) if isinstance(response, dict) else []
            raise AkeylessAuthenticationError(
                "Failed to obtain token from Akeyless authentication. "
                f"Response keys: {', '.join(keys)}"
            )

        logger.info(f"Authenticated to Akeyless as {credential.access_id.strip()}")
        return token
