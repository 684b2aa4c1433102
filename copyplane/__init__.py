"""
copyplane - access layer between a data-transfer orchestrator, object
storage and a secret store.

Features:
- Shared, lazily built storage clients, one per connection configuration
- Direct-copy vs. streaming decision for a pair of storage locations
- Credential tokens (static or temporary) resolved from a secret store
- Deterministic, collision-aware secret key name sanitation

Usage:
    >>> from copyplane import (
    ...     ClientCache, ConnectionConfig, InMemoryVault, LocationDescriptor,
    ...     is_direct_copy_eligible, resolve_secret_token, sanitize_key,
    ... )
    >>>
    >>> cache = ClientCache()
    >>> s3 = cache.s3_client(ConnectionConfig(region="eu-central-1"))
    >>>
    >>> source = LocationDescriptor("AmazonS3", {"bucketName": "a", "region": "eu-central-1"})
    >>> destination = LocationDescriptor("AmazonS3", {"bucketName": "b", "region": "eu-central-1"})
    >>> is_direct_copy_eligible(source, destination)
    True
    >>>
    >>> sanitize_key("invalid#key")
    'invalid-key_-954620461'
"""

from copyplane.core import (
    AWS_KEY_SIZE_LIMIT,
    AccessSettings,
    ConfigurationError,
    CopyplaneError,
    SecretError,
    SecretFormatError,
    SecretNotFoundError,
    SecretStoreError,
    configure,
    get_logger,
    get_settings,
    set_logger,
)
from copyplane.secrets import (
    InMemoryVault,
    KeySanitizer,
    SecretsManagerVault,
    SecretStore,
    SecretToken,
    StaticSecretToken,
    TemporarySecretToken,
    create_vault,
    parse_secret_token,
    resolve_secret_token,
    sanitize_key,
)
from copyplane.storage import (
    ClientCache,
    ClientCacheConfig,
    ClientKind,
    ConnectionConfig,
    LocationDescriptor,
    S3BucketSchema,
    create_client_cache,
)
from copyplane.transfer import (
    S3CopyTransferService,
    TransferRequest,
    TransferResult,
    TransferStrategy,
    choose_strategy,
    is_direct_copy_eligible,
    select_transfer_service,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "AWS_KEY_SIZE_LIMIT",
    "AccessSettings",
    "configure",
    "get_settings",
    # Errors
    "ConfigurationError",
    "CopyplaneError",
    "SecretError",
    "SecretFormatError",
    "SecretNotFoundError",
    "SecretStoreError",
    # Logging
    "get_logger",
    "set_logger",
    # Secrets
    "InMemoryVault",
    "KeySanitizer",
    "SecretStore",
    "SecretToken",
    "SecretsManagerVault",
    "StaticSecretToken",
    "TemporarySecretToken",
    "create_vault",
    "parse_secret_token",
    "resolve_secret_token",
    "sanitize_key",
    # Storage
    "ClientCache",
    "ClientCacheConfig",
    "ClientKind",
    "ConnectionConfig",
    "LocationDescriptor",
    "S3BucketSchema",
    "create_client_cache",
    # Transfer
    "S3CopyTransferService",
    "TransferRequest",
    "TransferResult",
    "TransferStrategy",
    "choose_strategy",
    "is_direct_copy_eligible",
    "select_transfer_service",
]
