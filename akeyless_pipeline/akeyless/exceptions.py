"""Custom exceptions for the Akeyless integration.

This module defines the error kinds raised by the Akeyless client and the
helper that turns a failed HTTP exchange into a human-readable message.
"""

from typing import Any, Optional

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class AkeylessError(Exception):
    """Base exception for Akeyless-related errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """Initialize Akeyless error.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return error string representation."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class AkeylessValidationError(AkeylessError):
    """Raised when a parameter or credential field is missing or invalid.

    Validation errors are detected locally and never reach the wire.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)


class AkeylessAuthenticationError(AkeylessError):
    """Raised when a token cannot be obtained from Akeyless."""

    prefix = "Akeyless authentication failed: "

    def __init__(
        self,
        message: str = "no token returned",
        details: Optional[dict] = None,
    ):
        super().__init__(f"{self.prefix}{message}", details)


class AkeylessRemoteError(AkeylessError):
    """Raised when an operation call fails in transport or with a non-2xx."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


def _response_payload(exc: BaseException) -> Any:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def resolve_error_message(exc: BaseException) -> str:
    """Build the most specific message available for a failed call.

    Priority: the vendor ``error`` field, the vendor ``message`` field, the
    exception's own text, then a generic fallback.
    """
    payload = _response_payload(exc)
    if isinstance(payload, dict):
        for field in ("error", "message"):
            value = payload.get(field)
            if value:
                return str(value)

    if isinstance(exc, AkeylessError):
        text = exc.message
    else:
        text = str(exc)
    return text or UNKNOWN_ERROR_MESSAGE
