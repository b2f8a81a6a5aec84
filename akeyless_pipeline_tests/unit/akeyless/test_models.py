"""Tests for Akeyless models: credential, transport and operation requests."""

from typing import ClassVar, Literal

import pytest
from pydantic import ValidationError

from akeyless_pipeline.akeyless import (
    Accessibility,
    AkeylessCredential,
    AkeylessValidationError,
    AuthMethod,
    CreateFolder,
    CreateSecret,
    DeleteFolder,
    DeleteItems,
    GetDynamicSecret,
    GetRotatedSecret,
    GetStaticSecret,
    OperationResult,
    TransportConfig,
    parse_operation,
)
from akeyless_pipeline.akeyless.models import _OperationBase


class TestAkeylessCredential:
    """Test AkeylessCredential model."""

    def test_default_values(self):
        credential = AkeylessCredential()
        assert credential.url == "https://api.akeyless.io"
        assert credential.auth_method == AuthMethod.ACCESS_KEY
        assert credential.allow_insecure_tls is False
        assert credential.token.get_secret_value() == ""

    def test_url_trailing_slash_stripped(self):
        credential = AkeylessCredential(url="https://gw.example.com:8080/api/v2/")
        assert credential.url == "https://gw.example.com:8080/api/v2"

    def test_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            AkeylessCredential(url="api.akeyless.io")

    def test_invalid_auth_method(self):
        with pytest.raises(ValidationError):
            AkeylessCredential(auth_method="ldap")

    def test_secrets_masked_in_repr(self):
        credential = AkeylessCredential(access_id="p-1", access_key="very-secret", token="t-abc")
        assert "very-secret" not in repr(credential)
        assert "t-abc" not in repr(credential)

    def test_credential_is_immutable(self):
        credential = AkeylessCredential(access_id="p-1")
        with pytest.raises(ValidationError):
            credential.access_id = "p-2"

    def test_check_credentials_access_key(self):
        AkeylessCredential(access_id="p-1", access_key="k-1").check_credentials()

    @pytest.mark.parametrize("access_id,access_key", [("", "k-1"), ("p-1", ""), ("  ", "k-1"), ("p-1", " \t")])
    def test_check_credentials_missing_access_key_fields(self, access_id, access_key):
        credential = AkeylessCredential(access_id=access_id, access_key=access_key)
        with pytest.raises(AkeylessValidationError) as exc_info:
            credential.check_credentials()
        assert "Access ID and Access Key are required" in str(exc_info.value)

    def test_check_credentials_token_method_requires_token(self):
        credential = AkeylessCredential(auth_method="token", access_id="p-1", access_key="k-1")
        with pytest.raises(AkeylessValidationError):
            credential.check_credentials()


class TestTransportConfig:
    """Test TransportConfig model."""

    def test_from_credential_defaults(self):
        transport = TransportConfig.from_credential(AkeylessCredential())
        assert transport.base_url == "https://api.akeyless.io"
        assert transport.verify is True
        assert transport.timeout_ms == 30000
        assert transport.timeout_seconds == 30.0

    def test_insecure_tls_disables_verification(self):
        credential = AkeylessCredential(allow_insecure_tls=True)
        transport = TransportConfig.from_credential(credential, timeout_ms=1500)
        assert transport.verify is False
        assert transport.timeout_seconds == 1.5

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            TransportConfig(base_url="https://api.akeyless.io", timeout_ms=0)

    def test_fractional_timeout_kept(self):
        transport = TransportConfig.from_credential(AkeylessCredential(), timeout_ms=0.5)
        assert transport.timeout_ms == 0.5
        assert transport.timeout_seconds == 0.0005

    @pytest.mark.parametrize("timeout_ms", [-1, -0.5, float("inf")])
    def test_from_credential_invalid_timeout_is_validation_error(self, timeout_ms):
        with pytest.raises(AkeylessValidationError) as exc_info:
            TransportConfig.from_credential(AkeylessCredential(), timeout_ms=timeout_ms)
        assert exc_info.value.message == "Invalid transport settings"
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestOperationBodies:
    """Each operation renders exactly its own wire fields plus token and json."""

    def test_get_static_secret(self):
        request = parse_operation({
            "operation": "getStaticSecret",
            "secretName": "db/password",
            "accessibility": "personal",
            "ignoreCache": True,
        })
        assert isinstance(request, GetStaticSecret)
        assert request.endpoint == "/get-secret-value"
        assert request.to_body("t-1") == {
            "accessibility": "personal",
            "ignore-cache": "true",
            "names": ["db/password"],
            "json": False,
            "token": "t-1",
        }

    def test_get_static_secret_defaults(self):
        body = parse_operation({"operation": "getStaticSecret", "secretName": "x"}).to_body("t")
        assert body["accessibility"] == "regular"
        assert body["ignore-cache"] == "false"

    def test_get_rotated_secret_name_is_plain_string(self):
        request = parse_operation({"operation": "getRotatedSecret", "secretName": "/rotated/pg"})
        assert isinstance(request, GetRotatedSecret)
        assert request.endpoint == "/get-rotated-secret-value"
        assert request.to_body("t-1") == {
            "ignore-cache": "false",
            "names": "/rotated/pg",
            "json": False,
            "token": "t-1",
        }

    def test_get_dynamic_secret(self):
        request = parse_operation({"operation": "getDynamicSecret", "secretName": "/dyn/aws", "timeout": 60})
        assert isinstance(request, GetDynamicSecret)
        assert request.endpoint == "/get-dynamic-secret-value"
        assert request.to_body("t-1") == {
            "name": "/dyn/aws",
            "timeout": 60,
            "json": False,
            "token": "t-1",
        }

    def test_get_dynamic_secret_default_timeout(self):
        request = parse_operation({"operation": "getDynamicSecret", "secretName": "/dyn/aws"})
        assert request.timeout == 15

    def test_create_generic_secret(self):
        request = parse_operation({
            "operation": "createSecret",
            "secretName": "/app/api-key",
            "secretValue": "abc123",
            "format": "json",
            "secureAccessWebProxy": True,
        })
        assert isinstance(request, CreateSecret)
        assert request.endpoint == "/create-secret"
        assert request.to_body("t-1") == {
            "accessibility": "regular",
            "format": "json",
            "name": "/app/api-key",
            "secure-access-web-browsing": False,
            "secure-access-web-proxy": True,
            "type": "generic",
            "value": "abc123",
            "json": False,
            "token": "t-1",
        }

    def test_create_password_secret(self):
        body = parse_operation({
            "operation": "createSecret",
            "secretName": "/app/login",
            "secretType": "password",
            "secretValue": "ignored",
            "username": "admin",
            "password": "hunter2",
        }).to_body("t-1")
        assert body["type"] == "password"
        assert body["username"] == "admin"
        assert body["password"] == "hunter2"
        assert "value" not in body

    def test_create_secret_value_masked_in_repr(self):
        request = parse_operation({"operation": "createSecret", "secretName": "s", "secretValue": "topsecret"})
        assert "topsecret" not in repr(request)

    def test_delete_items(self):
        request = parse_operation({"operation": "deleteItems", "path": "/app/old"})
        assert isinstance(request, DeleteItems)
        assert request.endpoint == "/delete-items"
        assert request.to_body("t-1") == {"path": "/app/old", "json": False, "token": "t-1"}

    @pytest.mark.parametrize("operation,model,endpoint", [
        ("createFolder", CreateFolder, "/folder-create"),
        ("deleteFolder", DeleteFolder, "/folder-delete"),
    ])
    def test_folder_operations(self, operation, model, endpoint):
        request = parse_operation({
            "operation": operation,
            "folderName": "/team",
            "folderAccessibility": "personal",
        })
        assert isinstance(request, model)
        assert request.endpoint == endpoint
        assert request.to_body("t-1") == {
            "accessibility": "personal",
            "name": "/team",
            "json": False,
            "token": "t-1",
        }

    def test_folder_accepts_plain_accessibility(self):
        request = parse_operation({"operation": "createFolder", "folderName": "/team", "accessibility": "personal"})
        assert request.accessibility == Accessibility.PERSONAL

    def test_parameters_of_other_operations_do_not_leak(self):
        body = parse_operation({
            "operation": "deleteItems",
            "path": "/app/old",
            "secretName": "unrelated",
            "folderName": "unrelated",
            "additionalFields": {"timeout": 1000},
        }).to_body("t-1")
        assert set(body) == {"path", "json", "token"}

    def test_snake_case_parameters_accepted(self):
        request = parse_operation({"operation": "getStaticSecret", "secret_name": "x", "ignore_cache": True})
        assert request.secret_name == "x"
        assert request.ignore_cache is True


class TestParseOperation:
    """Test parse_operation validation."""

    def test_unknown_operation(self):
        with pytest.raises(AkeylessValidationError) as exc_info:
            parse_operation({"operation": "rotateEverything"})
        assert "Unknown operation: rotateEverything" in str(exc_info.value)

    def test_missing_operation(self):
        with pytest.raises(AkeylessValidationError):
            parse_operation({"secretName": "x"})

    def test_missing_required_parameter(self):
        with pytest.raises(AkeylessValidationError) as exc_info:
            parse_operation({"operation": "getStaticSecret"})
        assert exc_info.value.details["errors"]

    def test_blank_required_parameter(self):
        with pytest.raises(AkeylessValidationError):
            parse_operation({"operation": "createFolder", "folderName": "   "})

    def test_invalid_enum_value(self):
        with pytest.raises(AkeylessValidationError):
            parse_operation({"operation": "createSecret", "secretName": "s", "secretType": "certificate"})

    def test_errors_do_not_echo_input(self):
        with pytest.raises(AkeylessValidationError) as exc_info:
            parse_operation({"operation": "createSecret", "secretName": "s", "secretType": "p@ssw0rd-value"})
        assert "p@ssw0rd-value" not in str(exc_info.value)

    def test_non_mapping_record(self):
        with pytest.raises(AkeylessValidationError):
            parse_operation(["getStaticSecret"])

    def test_model_passes_through(self):
        request = DeleteItems(path="/x")
        assert parse_operation(request) is request


class TestOperationBase:
    """Every request model must render its own body."""

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            _OperationBase()

    def test_variant_without_payload_cannot_be_built(self):
        class ListItems(_OperationBase):
            operation: Literal["listItems"] = "listItems"
            endpoint: ClassVar[str] = "/list-items"

        with pytest.raises(TypeError):
            ListItems()


class TestOperationResult:
    """Test OperationResult model."""

    def test_success_output_is_payload(self):
        result = OperationResult(item=0, data={"db/password": "s3cr3t"})
        assert result.ok
        assert result.to_output() == {"db/password": "s3cr3t"}

    def test_error_output(self):
        result = OperationResult(item=2, error="boom")
        assert not result.ok
        assert result.to_output() == {"error": "boom"}
