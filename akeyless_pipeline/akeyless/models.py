"""Pydantic models for the Akeyless integration.

This module defines the credential and transport settings, one request
model per supported operation, and the per-record result type.
"""

from abc import abstractmethod
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from akeyless_pipeline.akeyless.exceptions import AkeylessValidationError
from akeyless_pipeline.config import (
    AKEYLESS_DEFAULT_DYNAMIC_SECRET_TIMEOUT,
    AKEYLESS_DEFAULT_TIMEOUT_MS,
    AKEYLESS_DEFAULT_URL,
)


class AuthMethod(str, Enum):
    """Ways of obtaining a token."""

    ACCESS_KEY = "accessKey"
    TOKEN = "token"


class Accessibility(str, Enum):
    """Visibility scope of a secret or folder."""

    REGULAR = "regular"
    PERSONAL = "personal"


class SecretType(str, Enum):
    """Static secret types supported by create-secret."""

    GENERIC = "generic"
    PASSWORD = "password"


class SecretFormat(str, Enum):
    """Value format of a created secret."""

    TEXT = "text"
    JSON = "json"


class OperationKind(str, Enum):
    """Operations supported by the Akeyless node."""

    GET_STATIC_SECRET = "getStaticSecret"
    GET_ROTATED_SECRET = "getRotatedSecret"
    GET_DYNAMIC_SECRET = "getDynamicSecret"
    CREATE_SECRET = "createSecret"
    DELETE_ITEMS = "deleteItems"
    CREATE_FOLDER = "createFolder"
    DELETE_FOLDER = "deleteFolder"


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value


class AkeylessCredential(BaseModel):
    """Credential record for one execution context.

    Either ``token`` (a t-token) or the ``access_id``/``access_key`` pair is
    used to authenticate. Secret fields are masked in ``repr``.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        default=AKEYLESS_DEFAULT_URL,
        description="Akeyless API base URL",
        examples=["https://api.akeyless.io"],
    )
    auth_method: AuthMethod = Field(
        default=AuthMethod.ACCESS_KEY,
        description="Authentication method",
    )
    access_id: str = Field(
        default="",
        description="Access ID (starts with 'p-')",
    )
    access_key: SecretStr = Field(
        default=SecretStr(""),
        description="Access key (base64 encoded)",
    )
    token: SecretStr = Field(
        default=SecretStr(""),
        description="Akeyless t-token",
    )
    allow_insecure_tls: bool = Field(
        default=False,
        description="Skip TLS certificate verification",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate API address format."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v.rstrip("/")

    def check_credentials(self) -> None:
        """Check the configured method has what it needs to authenticate.

        Raises:
            AkeylessValidationError: If a required field is empty
        """
        if self.auth_method == AuthMethod.TOKEN:
            if not self.token.get_secret_value().strip():
                raise AkeylessValidationError(
                    "Token authentication requires a token"
                )
            return

        if not self.access_id.strip() or not self.access_key.get_secret_value().strip():
            raise AkeylessValidationError(
                "Access ID and Access Key are required when not using token authentication"
            )


class TransportConfig(BaseModel):
    """HTTP settings passed explicitly into every request.

    TLS verification is a per-call setting here, never a process-wide one.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="API base URL without trailing slash")
    verify: bool = Field(default=True, description="Verify TLS certificates")
    timeout_ms: float = Field(
        default=AKEYLESS_DEFAULT_TIMEOUT_MS,
        description="Per-request timeout in milliseconds",
        gt=0,
        allow_inf_nan=False,
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_credential(
        cls,
        credential: AkeylessCredential,
        timeout_ms: Optional[float] = None,
    ) -> "TransportConfig":
        try:
            return cls(
                base_url=credential.url,
                verify=not credential.allow_insecure_tls,
                timeout_ms=timeout_ms or AKEYLESS_DEFAULT_TIMEOUT_MS,
            )
        except ValidationError as e:
            raise AkeylessValidationError(
                "Invalid transport settings",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e


# =====================================================================
# Operation requests
# =====================================================================


class _OperationBase(BaseModel):
    """Common behaviour of the operation request models."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    endpoint: ClassVar[str]

    @abstractmethod
    def payload(self) -> dict[str, Any]:
        """Operation-specific body fields, without ``json`` and ``token``."""

    def to_body(self, token: str) -> dict[str, Any]:
        """Render the JSON request body sent to ``endpoint``."""
        body = self.payload()
        body["json"] = False
        body["token"] = token
        return body


class GetStaticSecret(_OperationBase):
    operation: Literal["getStaticSecret"] = "getStaticSecret"
    endpoint: ClassVar[str] = "/get-secret-value"

    secret_name: str = Field(..., alias="secretName")
    accessibility: Accessibility = Accessibility.REGULAR
    ignore_cache: bool = Field(default=False, alias="ignoreCache")

    @field_validator("secret_name")
    @classmethod
    def validate_secret_name(cls, v: str) -> str:
        return _require_text(v, "secretName")

    def payload(self) -> dict[str, Any]:
        return {
            "accessibility": self.accessibility.value,
            "ignore-cache": "true" if self.ignore_cache else "false",
            "names": [self.secret_name],
        }


class GetRotatedSecret(_OperationBase):
    operation: Literal["getRotatedSecret"] = "getRotatedSecret"
    endpoint: ClassVar[str] = "/get-rotated-secret-value"

    secret_name: str = Field(..., alias="secretName")
    ignore_cache: bool = Field(default=False, alias="ignoreCache")

    @field_validator("secret_name")
    @classmethod
    def validate_secret_name(cls, v: str) -> str:
        return _require_text(v, "secretName")

    def payload(self) -> dict[str, Any]:
        # The rotated-secret endpoint takes a single name, not a list
        return {
            "ignore-cache": "true" if self.ignore_cache else "false",
            "names": self.secret_name,
        }


class GetDynamicSecret(_OperationBase):
    operation: Literal["getDynamicSecret"] = "getDynamicSecret"
    endpoint: ClassVar[str] = "/get-dynamic-secret-value"

    secret_name: str = Field(..., alias="secretName")
    timeout: int = Field(
        default=AKEYLESS_DEFAULT_DYNAMIC_SECRET_TIMEOUT,
        description="Seconds the vendor waits for the dynamic secret",
        gt=0,
    )

    @field_validator("secret_name")
    @classmethod
    def validate_secret_name(cls, v: str) -> str:
        return _require_text(v, "secretName")

    def payload(self) -> dict[str, Any]:
        return {
            "name": self.secret_name,
            "timeout": self.timeout,
        }


class CreateSecret(_OperationBase):
    """Create a static secret.

    Generic secrets send ``value``; password secrets send ``username`` and
    ``password`` instead.
    """

    operation: Literal["createSecret"] = "createSecret"
    endpoint: ClassVar[str] = "/create-secret"

    secret_name: str = Field(..., alias="secretName")
    secret_type: SecretType = Field(default=SecretType.GENERIC, alias="secretType")
    format: SecretFormat = SecretFormat.TEXT
    accessibility: Accessibility = Accessibility.REGULAR
    secret_value: SecretStr = Field(default=SecretStr(""), alias="secretValue")
    username: str = ""
    password: SecretStr = SecretStr("")
    secure_access_web_browsing: bool = Field(
        default=False, alias="secureAccessWebBrowsing"
    )
    secure_access_web_proxy: bool = Field(default=False, alias="secureAccessWebProxy")

    @field_validator("secret_name")
    @classmethod
    def validate_secret_name(cls, v: str) -> str:
        return _require_text(v, "secretName")

    def payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "accessibility": self.accessibility.value,
            "format": self.format.value,
            "name": self.secret_name,
            "secure-access-web-browsing": self.secure_access_web_browsing,
            "secure-access-web-proxy": self.secure_access_web_proxy,
            "type": self.secret_type.value,
        }
        if self.secret_type == SecretType.PASSWORD:
            body["username"] = self.username
            body["password"] = self.password.get_secret_value()
        else:
            body["value"] = self.secret_value.get_secret_value()
        return body


class DeleteItems(_OperationBase):
    operation: Literal["deleteItems"] = "deleteItems"
    endpoint: ClassVar[str] = "/delete-items"

    path: str

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        return _require_text(v, "path")

    def payload(self) -> dict[str, Any]:
        return {"path": self.path}


class _FolderOperation(_OperationBase):
    folder_name: str = Field(..., alias="folderName")
    accessibility: Accessibility = Field(
        default=Accessibility.REGULAR,
        validation_alias=AliasChoices("folderAccessibility", "accessibility"),
    )

    @field_validator("folder_name")
    @classmethod
    def validate_folder_name(cls, v: str) -> str:
        return _require_text(v, "folderName")

    def payload(self) -> dict[str, Any]:
        return {
            "accessibility": self.accessibility.value,
            "name": self.folder_name,
        }


class CreateFolder(_FolderOperation):
    operation: Literal["createFolder"] = "createFolder"
    endpoint: ClassVar[str] = "/folder-create"


class DeleteFolder(_FolderOperation):
    operation: Literal["deleteFolder"] = "deleteFolder"
    endpoint: ClassVar[str] = "/folder-delete"


OperationRequest = Annotated[
    Union[
        GetStaticSecret,
        GetRotatedSecret,
        GetDynamicSecret,
        CreateSecret,
        DeleteItems,
        CreateFolder,
        DeleteFolder,
    ],
    Field(discriminator="operation"),
]

OPERATION_MODELS: dict[str, type[_OperationBase]] = {
    OperationKind.GET_STATIC_SECRET.value: GetStaticSecret,
    OperationKind.GET_ROTATED_SECRET.value: GetRotatedSecret,
    OperationKind.GET_DYNAMIC_SECRET.value: GetDynamicSecret,
    OperationKind.CREATE_SECRET.value: CreateSecret,
    OperationKind.DELETE_ITEMS.value: DeleteItems,
    OperationKind.CREATE_FOLDER.value: CreateFolder,
    OperationKind.DELETE_FOLDER.value: DeleteFolder,
}

_operation_adapter: TypeAdapter = TypeAdapter(OperationRequest)


def parse_operation(record: Union[Mapping[str, Any], _OperationBase]) -> OperationRequest:
    """Turn a host record into the request model for its operation.

    Args:
        record: Mapping with an ``operation`` key plus that operation's
            parameters, or an already-built request model

    Returns:
        The request model for the operation

    Raises:
        AkeylessValidationError: If the operation is unknown or a parameter
            is missing or invalid
    """
    if isinstance(record, _OperationBase):
        return record
    if not isinstance(record, Mapping):
        raise AkeylessValidationError(
            f"Record must be a mapping, got {type(record).__name__}"
        )

    operation = record.get("operation")
    if isinstance(operation, Enum):
        operation = operation.value
    if operation not in OPERATION_MODELS:
        raise AkeylessValidationError(f"Unknown operation: {operation}")

    try:
        return _operation_adapter.validate_python({**record, "operation": operation})
    except ValidationError as e:
        # Messages only; never echo the offending input, it may be a secret
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise AkeylessValidationError(
            f"Invalid parameters for {operation}",
            details={"errors": errors},
        ) from e


class OperationResult(BaseModel):
    """Outcome of one input record, tagged with the record's position."""

    item: int = Field(..., description="Index of the originating record", ge=0)
    data: Any = Field(default=None, description="Vendor payload, verbatim")
    error: Optional[str] = Field(default=None, description="Error message")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_output(self) -> Any:
        """Return what the host emits for this record."""
        if self.error is not None:
            return {"error": self.error}
        return self.data
