"""
Tests for the secret store implementations.
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from copyplane.core.config import AccessSettings, configure
from copyplane.core.exceptions import ConfigurationError, SecretStoreError
from copyplane.secrets.sanitizer import sanitize_key
from copyplane.secrets.vault import InMemoryVault, SecretsManagerVault, SecretStore, create_vault
from copyplane.storage.connection import ClientKind, ConnectionConfig


def client_error(code: str, operation: str = "GetSecretValue") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestInMemoryVault:
    """Tests for InMemoryVault."""

    def test_is_secret_store(self, vault):
        assert isinstance(vault, SecretStore)

    def test_store_and_resolve(self, vault):
        vault.store_secret("key", "value")
        assert vault.resolve_secret("key") == "value"

    def test_missing_key(self, vault):
        assert vault.resolve_secret("missing") is None

    def test_keys_are_sanitized(self, vault):
        vault.store_secret("process#1", "value")
        assert vault.keys() == [sanitize_key("process#1")]
        assert vault.resolve_secret("process#1") == "value"

    def test_delete(self, vault):
        vault.store_secret("key", "value")
        assert vault.delete_secret("key") is True
        assert vault.delete_secret("key") is False
        assert len(vault) == 0

    def test_len_holds_lock(self, vault):
        vault.store_secret("key", "value")
        vault._lock = MagicMock()

        assert len(vault) == 1
        vault._lock.__enter__.assert_called_once()
        vault._lock.__exit__.assert_called_once()

    def test_custom_sanitizer(self):
        vault = InMemoryVault(sanitizer=str.upper)
        vault.store_secret("key", "value")
        assert vault.keys() == ["KEY"]


class TestSecretsManagerVault:
    """Tests for SecretsManagerVault against a mocked client."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def sm_vault(self, client):
        return SecretsManagerVault(client)

    def test_resolve(self, sm_vault, client):
        client.get_secret_value.return_value = {"SecretString": "payload"}
        assert sm_vault.resolve_secret("key") == "payload"
        client.get_secret_value.assert_called_once_with(SecretId="key")

    def test_resolve_sanitizes_key(self, sm_vault, client):
        client.get_secret_value.return_value = {"SecretString": "payload"}
        sm_vault.resolve_secret("invalid#key")
        client.get_secret_value.assert_called_once_with(SecretId="invalid-key_-954620461")

    def test_resolve_not_found(self, sm_vault, client):
        client.get_secret_value.side_effect = client_error("ResourceNotFoundException")
        assert sm_vault.resolve_secret("key") is None

    def test_resolve_binary_secret_is_none(self, sm_vault, client):
        client.get_secret_value.return_value = {"SecretBinary": b"\x00"}
        assert sm_vault.resolve_secret("key") is None

    def test_resolve_access_denied(self, sm_vault, client):
        client.get_secret_value.side_effect = client_error("AccessDeniedException")
        with pytest.raises(SecretStoreError) as exc_info:
            sm_vault.resolve_secret("key")
        assert exc_info.value.operation == "resolve"
        assert exc_info.value.key_name == "key"
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_resolve_connection_failure(self, sm_vault, client):
        client.get_secret_value.side_effect = EndpointConnectionError(endpoint_url="https://sm")
        with pytest.raises(SecretStoreError):
            sm_vault.resolve_secret("key")

    def test_store_creates(self, sm_vault, client):
        sm_vault.store_secret("key", "value")
        client.create_secret.assert_called_once_with(Name="key", SecretString="value")
        client.put_secret_value.assert_not_called()

    def test_store_existing_puts_new_version(self, sm_vault, client):
        client.create_secret.side_effect = client_error("ResourceExistsException", "CreateSecret")
        sm_vault.store_secret("key", "value")
        client.put_secret_value.assert_called_once_with(SecretId="key", SecretString="value")

    def test_store_failure(self, sm_vault, client):
        client.create_secret.side_effect = client_error("LimitExceededException", "CreateSecret")
        with pytest.raises(SecretStoreError) as exc_info:
            sm_vault.store_secret("key", "value")
        assert exc_info.value.operation == "store"

    def test_delete(self, sm_vault, client):
        assert sm_vault.delete_secret("key") is True
        client.delete_secret.assert_called_once_with(SecretId="key", ForceDeleteWithoutRecovery=True)

    def test_delete_missing(self, sm_vault, client):
        client.delete_secret.side_effect = client_error("ResourceNotFoundException", "DeleteSecret")
        assert sm_vault.delete_secret("key") is False

    def test_delete_failure(self, sm_vault, client):
        client.delete_secret.side_effect = client_error("InternalServiceError", "DeleteSecret")
        with pytest.raises(SecretStoreError):
            sm_vault.delete_secret("key")


class TestCreateVault:
    """Tests for create_vault."""

    def test_requires_region(self, cache):
        with pytest.raises(ConfigurationError) as exc_info:
            create_vault(cache, AccessSettings())
        assert exc_info.value.field == "vault_region"

    def test_defaults_to_global_settings(self, cache, builder):
        configure(AccessSettings(vault_region="ap-south-1"))

        vault = create_vault(cache)

        assert isinstance(vault, SecretsManagerVault)
        assert builder.builds == [(ClientKind.SECRETS_MANAGER, ConnectionConfig(region="ap-south-1"))]

    def test_global_settings_without_region(self, cache):
        with pytest.raises(ConfigurationError):
            create_vault(cache)

    def test_uses_cached_secrets_manager_client(self, cache, builder):
        vault = create_vault(cache, AccessSettings(vault_region="eu-west-1"))

        assert isinstance(vault, SecretsManagerVault)
        assert builder.builds == [(ClientKind.SECRETS_MANAGER, ConnectionConfig(region="eu-west-1"))]
        assert vault.client is cache.secrets_manager_client(ConnectionConfig(region="eu-west-1"))

    def test_applies_key_size_limit(self, cache):
        vault = create_vault(cache, AccessSettings(vault_region="eu-west-1", key_size_limit=64))
        vault.client.get_secret_value = MagicMock(return_value={"SecretString": "x"})

        vault.resolve_secret("k" * 100)

        secret_id = vault.client.get_secret_value.call_args.kwargs["SecretId"]
        assert len(secret_id) == 64
