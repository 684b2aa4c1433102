"""
Client cache - one shared storage client per connection configuration.

Building a boto3 client is expensive (endpoint resolution, credential chain,
an HTTP connection pool per client), so clients are built lazily and reused
for the lifetime of the process.

Usage:
    >>> cache = ClientCache(ClientCacheConfig(max_pool_connections=20))
    >>> s3 = cache.s3_client(ConnectionConfig(region="eu-central-1"))
    >>> s3 is cache.s3_client(ConnectionConfig(region="eu-central-1"))
    True
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from copyplane.core.exceptions import ConfigurationError
from copyplane.core.logger import get_logger
from copyplane.secrets.tokens import credential_kwargs
from copyplane.storage.connection import ClientCacheConfig, ClientKind, ConnectionConfig

if TYPE_CHECKING:
    from copyplane.monitoring.prometheus import AccessMetrics

logger = get_logger(__name__)

CacheKey = tuple[ClientKind, ConnectionConfig]


class ClientBuilder(Protocol):
    """Factory turning a connection configuration into a service client."""

    def __call__(self, kind: ClientKind, config: ConnectionConfig) -> Any: ...


class Boto3ClientBuilder:
    """
    Builds boto3 low-level clients.

    Each build uses its own ``boto3.session.Session`` since sessions are not
    safe to share between threads. S3 clients pointed at an endpoint
    override use path-style addressing, which S3-compatible services such as
    MinIO require.
    """

    def __init__(self, cache_config: ClientCacheConfig | None = None):
        self.cache_config = cache_config or ClientCacheConfig()

    def __call__(self, kind: ClientKind, config: ConnectionConfig) -> Any:
        endpoint_override = config.endpoint_override or self.cache_config.endpoint_override

        options: dict[str, Any] = {"max_pool_connections": self.cache_config.max_pool_connections}
        if kind is ClientKind.S3 and endpoint_override:
            options["s3"] = {"addressing_style": "path"}

        kwargs: dict[str, Any] = {
            "region_name": config.region,
            "config": Config(**options),
            **credential_kwargs(config.credentials),
        }
        if endpoint_override:
            kwargs["endpoint_url"] = endpoint_override

        try:
            session = boto3.session.Session()
            return session.client(kind.value, **kwargs)
        except (BotoCoreError, ValueError) as e:
            msg = f"Failed to create {kind.value} client: {e}"
            raise ConfigurationError(
                msg, field="connection", value=config.region, endpoint=endpoint_override
            ) from e


class ClientCache:
    """
    Keyed registry of shared service clients.

    Guarantees:
    - Equal ``(kind, config)`` pairs always get the identical client object
    - A client is built at most once per key, even under concurrent callers
    - Nothing is built before it is first requested

    Lookups of existing clients take no lock. A miss takes a per-key lock,
    so builds for unrelated keys never wait on each other.
    """

    def __init__(
        self,
        config: ClientCacheConfig | None = None,
        builder: ClientBuilder | None = None,
        metrics: AccessMetrics | None = None,
    ):
        self.config = config or ClientCacheConfig()
        self._builder = builder or Boto3ClientBuilder(self.config)
        self.metrics = metrics
        self._clients: dict[CacheKey, Any] = {}
        self._key_locks: dict[CacheKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_client(self, kind: ClientKind, config: ConnectionConfig) -> Any:
        """
        Return the shared client for ``(kind, config)``, building it on first use.

        Raises:
            ConfigurationError: If the client cannot be built from ``config``
        """
        key = (kind, config)

        client = self._clients.get(key)
        if client is not None:
            return client

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # another caller may have built it while we waited
            client = self._clients.get(key)
            if client is not None:
                return client

            logger.debug(
                f"Building {kind.value} client for region={config.region} "
                f"endpoint_override={config.endpoint_override}"
            )
            client = self._builder(kind, config)
            self._clients[key] = client

        if self.metrics:
            self.metrics.record_client_created(kind.value)
        return client

    def s3_client(self, config: ConnectionConfig) -> Any:
        return self.get_client(ClientKind.S3, config)

    def sts_client(self, config: ConnectionConfig) -> Any:
        return self.get_client(ClientKind.STS, config)

    def iam_client(self, config: ConnectionConfig) -> Any:
        return self.get_client(ClientKind.IAM, config)

    def secrets_manager_client(self, config: ConnectionConfig) -> Any:
        return self.get_client(ClientKind.SECRETS_MANAGER, config)

    def close(self) -> None:
        """
        Close every cached client and empty the cache.

        Only meant for process shutdown; clients handed out earlier must not
        be used afterwards.
        """
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
            self._key_locks.clear()

        for client in clients:
            close = getattr(client, "close", None)
            if callable(close):
                close()
        logger.debug(f"Closed {len(clients)} cached clients")

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, key: object) -> bool:
        return key in self._clients

    def __enter__(self) -> ClientCache:
        return self

    def __exit__(self, *args) -> None:
        self.close()
