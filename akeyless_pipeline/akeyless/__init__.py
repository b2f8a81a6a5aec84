"""Akeyless module for secrets-management REST integration.

This module provides a stateless Akeyless client (authenticate, then
dispatch one operation per record), its Pydantic models and exceptions.
"""

from akeyless_pipeline.akeyless.auth import Authenticator
from akeyless_pipeline.akeyless.client import AkeylessClient, request_timeout_ms
from akeyless_pipeline.akeyless.dispatcher import OperationDispatcher
from akeyless_pipeline.akeyless.exceptions import (
    AkeylessAuthenticationError,
    AkeylessError,
    AkeylessRemoteError,
    AkeylessValidationError,
    resolve_error_message,
)
from akeyless_pipeline.akeyless.models import (
    Accessibility,
    AkeylessCredential,
    AuthMethod,
    CreateFolder,
    CreateSecret,
    DeleteFolder,
    DeleteItems,
    GetDynamicSecret,
    GetRotatedSecret,
    GetStaticSecret,
    OperationKind,
    OperationRequest,
    OperationResult,
    SecretFormat,
    SecretType,
    TransportConfig,
    parse_operation,
)

__all__ = [
    "Authenticator",
    "AkeylessClient",
    "request_timeout_ms",
    "OperationDispatcher",
    "AkeylessAuthenticationError",
    "AkeylessError",
    "AkeylessRemoteError",
    "AkeylessValidationError",
    "resolve_error_message",
    "Accessibility",
    "AkeylessCredential",
    "AuthMethod",
    "CreateFolder",
    "CreateSecret",
    "DeleteFolder",
    "DeleteItems",
    "GetDynamicSecret",
    "GetRotatedSecret",
    "GetStaticSecret",
    "OperationKind",
    "OperationRequest",
    "OperationResult",
    "SecretFormat",
    "SecretType",
    "TransportConfig",
    "parse_operation",
]
