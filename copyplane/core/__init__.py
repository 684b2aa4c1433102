"""
Core module for copyplane - configuration, errors and logging shared by
every component of the access layer.
"""

from copyplane.core.config import AWS_KEY_SIZE_LIMIT, AccessSettings, configure, get_settings
from copyplane.core.env import EnvManager, get_env, load_env
from copyplane.core.exceptions import (
    ConfigurationError,
    CopyplaneError,
    SecretError,
    SecretFormatError,
    SecretNotFoundError,
    SecretStoreError,
)
from copyplane.core.logger import (
    ComponentLogger,
    configure_default_logging,
    get_logger,
    resolve_logger,
    set_logger,
)

__all__ = [
    # Config
    "AWS_KEY_SIZE_LIMIT",
    "AccessSettings",
    "configure",
    "get_settings",
    # Env
    "EnvManager",
    "get_env",
    "load_env",
    # Exceptions
    "ConfigurationError",
    "CopyplaneError",
    "SecretError",
    "SecretFormatError",
    "SecretNotFoundError",
    "SecretStoreError",
    # Logger
    "ComponentLogger",
    "configure_default_logging",
    "get_logger",
    "resolve_logger",
    "set_logger",
]
