"""
Secret stores.

The access layer only needs ``resolve_secret(key) -> str | None`` from a
store (see ``SecretStore``). Two implementations are provided:

- InMemoryVault: dict-backed, for tests and local development
- SecretsManagerVault: AWS Secrets Manager

Both sanitize key names before touching the backing store, so callers can
use arbitrary resource names as keys.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from botocore.exceptions import BotoCoreError, ClientError

from copyplane.core.config import AccessSettings, get_settings
from copyplane.core.exceptions import ConfigurationError, SecretStoreError
from copyplane.core.logger import get_logger
from copyplane.secrets.sanitizer import KeySanitizer

if TYPE_CHECKING:
    from copyplane.storage.clients import ClientCache

logger = get_logger(__name__)


@runtime_checkable
class SecretStore(Protocol):
    """Read side of a key-value secret service."""

    def resolve_secret(self, key: str) -> str | None:
        """Return the secret stored under ``key``, or None if there is none."""
        ...


class InMemoryVault:
    """
    Dict-backed secret store.

    Thread-safe; keys are sanitized exactly like the Secrets Manager vault
    so that tests exercise the same key names.
    """

    def __init__(self, sanitizer: Callable[[str], str] | None = None):
        self._sanitize = sanitizer or KeySanitizer()
        self._secrets: dict[str, str] = {}
        self._lock = threading.Lock()

    def resolve_secret(self, key: str) -> str | None:
        with self._lock:
            return self._secrets.get(self._sanitize(key))

    def store_secret(self, key: str, value: str) -> None:
        with self._lock:
            self._secrets[self._sanitize(key)] = value

    def delete_secret(self, key: str) -> bool:
        with self._lock:
            return self._secrets.pop(self._sanitize(key), None) is not None

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._secrets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._secrets)


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class SecretsManagerVault:
    """
    AWS Secrets Manager secret store.

    Example:
        >>> cache = ClientCache()
        >>> vault = create_vault(cache, AccessSettings(vault_region="eu-central-1"))
        >>> vault.store_secret("transfer/123", token.to_json())
        >>> vault.resolve_secret("transfer/123")
    """

    NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})

    def __init__(self, client: Any, sanitizer: Callable[[str], str] | None = None):
        self.client = client
        self._sanitize = sanitizer or KeySanitizer()

    def resolve_secret(self, key: str) -> str | None:
        name = self._sanitize(key)
        logger.debug(f"Resolving secret '{name}'")
        try:
            response = self.client.get_secret_value(SecretId=name)
        except ClientError as e:
            if _error_code(e) in self.NOT_FOUND_CODES:
                logger.debug(f"Secret '{name}' not found")
                return None
            raise self._store_error("resolve", name, e) from e
        except BotoCoreError as e:
            raise self._store_error("resolve", name, e) from e
        return response.get("SecretString")

    def store_secret(self, key: str, value: str) -> None:
        """Create the secret, or add a new version if it already exists."""
        name = self._sanitize(key)
        try:
            try:
                self.client.create_secret(Name=name, SecretString=value)
                logger.debug(f"Created secret '{name}'")
            except ClientError as e:
                if _error_code(e) != "ResourceExistsException":
                    raise
                self.client.put_secret_value(SecretId=name, SecretString=value)
                logger.debug(f"Stored new version of secret '{name}'")
        except (ClientError, BotoCoreError) as e:
            raise self._store_error("store", name, e) from e

    def delete_secret(self, key: str) -> bool:
        """Delete the secret immediately; False if it did not exist."""
        name = self._sanitize(key)
        try:
            self.client.delete_secret(SecretId=name, ForceDeleteWithoutRecovery=True)
        except ClientError as e:
            if _error_code(e) in self.NOT_FOUND_CODES:
                return False
            raise self._store_error("delete", name, e) from e
        except BotoCoreError as e:
            raise self._store_error("delete", name, e) from e
        logger.debug(f"Deleted secret '{name}'")
        return True

    @staticmethod
    def _store_error(operation: str, name: str, error: Exception) -> SecretStoreError:
        logger.error(f"Secrets Manager failed to {operation} secret '{name}': {error}")
        return SecretStoreError(
            f"Failed to {operation} secret '{name}'", key_name=name, operation=operation
        )


def create_vault(cache: ClientCache, settings: AccessSettings | None = None) -> SecretsManagerVault:
    """
    Build a Secrets Manager vault on a client taken from the cache.

    Uses the global settings (see ``copyplane.core.config.configure``) when
    none are given.

    Raises:
        ConfigurationError: If no vault region is configured
    """
    from copyplane.storage.connection import ConnectionConfig

    settings = settings or get_settings()
    if not settings.vault_region:
        msg = "A vault region is required (COPYPLANE_VAULT_REGION)"
        raise ConfigurationError(msg, field="vault_region")

    client = cache.secrets_manager_client(ConnectionConfig(region=settings.vault_region))
    sanitizer = KeySanitizer(limit=settings.key_size_limit, metrics=cache.metrics)
    return SecretsManagerVault(client, sanitizer)
