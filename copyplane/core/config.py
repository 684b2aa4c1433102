"""
AccessSettings - Unified configuration for the copyplane access layer.

Wires together the knobs shared by the client cache, the secret store and
observability:

Example (environment):
    >>> import os
    >>> os.environ["COPYPLANE_VAULT_REGION"] = "eu-central-1"
    >>> settings = AccessSettings.from_env()

Example (file):
    >>> settings = AccessSettings.from_file("copyplane.yaml")
    >>> cache = ClientCache(settings.client_cache_config())
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from copyplane.core.exceptions import ConfigurationError
from copyplane.core.logger import get_logger

if TYPE_CHECKING:
    from copyplane.storage.connection import ClientCacheConfig

logger = get_logger(__name__)

AWS_KEY_SIZE_LIMIT = 512
# "_" plus the widest rendered 32-bit hash ("-2147483648")
MIN_KEY_SIZE_LIMIT = 13


@dataclass(frozen=True)
class AccessSettings:
    """
    Process-wide settings for the access layer.

    Attributes:
        endpoint_override: Default service URL used when a request carries none
        max_pool_connections: Connection pool size of every built client
        vault_region: Region of the Secrets Manager vault
        key_size_limit: Maximum secret key name length
        log_level: Level applied by ``configure_default_logging``
        metrics_enabled: Collect Prometheus metrics
    """

    endpoint_override: str | None = None
    max_pool_connections: int = 10
    vault_region: str | None = None
    key_size_limit: int = AWS_KEY_SIZE_LIMIT
    log_level: str = "INFO"
    metrics_enabled: bool = False

    def __post_init__(self) -> None:
        if self.max_pool_connections < 1:
            msg = "max_pool_connections must be at least 1"
            raise ConfigurationError(msg, field="max_pool_connections", value=self.max_pool_connections)
        if self.key_size_limit < MIN_KEY_SIZE_LIMIT:
            msg = "key_size_limit must leave room for the hash suffix"
            raise ConfigurationError(msg, field="key_size_limit", value=self.key_size_limit)

    def client_cache_config(self) -> ClientCacheConfig:
        """Derive the client cache configuration."""
        from copyplane.storage.connection import ClientCacheConfig

        return ClientCacheConfig(
            endpoint_override=self.endpoint_override,
            max_pool_connections=self.max_pool_connections,
        )

    def with_vault_region(self, region: str) -> AccessSettings:
        """Create new settings with a different vault region (immutable update)."""
        return replace(self, vault_region=region)

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> AccessSettings:
        """
        Create settings from environment variables.

        Environment variables:
            COPYPLANE_ENDPOINT_OVERRIDE: Default endpoint override URL
            COPYPLANE_MAX_POOL_CONNECTIONS: Client connection pool size
            COPYPLANE_VAULT_REGION: Secrets Manager region
            COPYPLANE_KEY_SIZE_LIMIT: Secret key name length limit
            COPYPLANE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
            COPYPLANE_METRICS_ENABLED: Enable metrics (true/false)
        """
        from copyplane.core.env import get_env

        env = get_env()
        if load_dotenv:
            env.load()

        return cls(
            endpoint_override=env.get("COPYPLANE_ENDPOINT_OVERRIDE") or None,
            max_pool_connections=env.get_int("COPYPLANE_MAX_POOL_CONNECTIONS", 10),
            vault_region=env.get("COPYPLANE_VAULT_REGION") or None,
            key_size_limit=env.get_int("COPYPLANE_KEY_SIZE_LIMIT", AWS_KEY_SIZE_LIMIT),
            log_level=env.get("COPYPLANE_LOG_LEVEL", "INFO") or "INFO",
            metrics_enabled=env.get_bool("COPYPLANE_METRICS_ENABLED", False),
        )

    @classmethod
    def from_file(cls, file_path: str | Path, substitute_env: bool = True) -> AccessSettings:
        """
        Load settings from a YAML or JSON file.

        Supports environment variable substitution using ${VAR} syntax.
        Settings may sit at the top level or under a ``copyplane`` key.
        """
        path = Path(file_path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise ConfigurationError(msg, field="file_path", value=str(path))

        text = path.read_text()
        data: Any = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        data = data or {}
        if not isinstance(data, dict):
            msg = "Configuration file must contain a mapping"
            raise ConfigurationError(msg, field="file_path", value=str(path))

        data = data.get("copyplane", data)

        if substitute_env:
            from copyplane.core.env import get_env

            data = get_env().substitute_dict(data)

        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        for name in ("max_pool_connections", "key_size_limit"):
            if name in values:
                try:
                    values[name] = int(values[name])
                except (TypeError, ValueError) as e:
                    msg = f"{name} must be an integer"
                    raise ConfigurationError(msg, field=name, value=values[name]) from e
        if isinstance(values.get("metrics_enabled"), str):
            values["metrics_enabled"] = values["metrics_enabled"].lower() in ("true", "1", "yes", "on")

        return cls(**values)


# Global settings singleton
_global_settings: AccessSettings | None = None


def get_settings() -> AccessSettings:
    """Get the global access settings."""
    global _global_settings
    if _global_settings is None:
        _global_settings = AccessSettings()
    return _global_settings


def configure(settings: AccessSettings) -> None:
    """Set the global access settings."""
    global _global_settings
    _global_settings = settings
    logger.info(
        f"copyplane configured: vault_region={settings.vault_region}, "
        f"endpoint_override={settings.endpoint_override}"
    )
