"""
Connection configuration for storage clients.

A ConnectionConfig is the identity of a client in the ClientCache:
structurally equal configs share one client instance.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from copyplane.core.exceptions import ConfigurationError
from copyplane.secrets.tokens import SecretToken

_REGION_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class ClientKind(Enum):
    """Service clients the cache can build, valued by boto3 service name."""

    S3 = "s3"
    STS = "sts"
    IAM = "iam"
    SECRETS_MANAGER = "secretsmanager"


def validate_endpoint_override(endpoint_override: str | None) -> str | None:
    """
    Normalise an endpoint override.

    Blank values mean "no override" and return None. Anything else must be
    an absolute http(s) URL.

    Raises:
        ConfigurationError: If the value is not a usable URL
    """
    if endpoint_override is None or not endpoint_override.strip():
        return None

    value = endpoint_override.strip()
    try:
        parts = urlsplit(value)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as e:
        msg = f"Cannot use endpoint override '{value}' as URI"
        raise ConfigurationError(msg, field="endpoint_override", value=value) from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"Cannot use endpoint override '{value}' as URI"
        raise ConfigurationError(msg, field="endpoint_override", value=value)
    return value


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Configuration a storage client is bound to.

    Attributes:
        region: Service region, e.g. ``eu-central-1``
        endpoint_override: Explicit service URL replacing the regional default
        credentials: Credential material the client signs with; None uses the
            ambient credential chain
    """

    region: str
    endpoint_override: str | None = None
    credentials: SecretToken | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.region, str) or not _REGION_PATTERN.match(self.region.strip()):
            msg = f"Invalid region '{self.region}'"
            raise ConfigurationError(msg, field="region", value=self.region)
        object.__setattr__(self, "region", self.region.strip())
        object.__setattr__(
            self, "endpoint_override", validate_endpoint_override(self.endpoint_override)
        )

    @classmethod
    def from_location(cls, location, credentials: SecretToken | None = None) -> "ConnectionConfig":
        """Build the config addressing an object-storage location descriptor."""
        from copyplane.storage.schema import S3BucketSchema

        return cls(
            region=location.get(S3BucketSchema.REGION, ""),
            endpoint_override=location.get(S3BucketSchema.ENDPOINT_OVERRIDE),
            credentials=credentials,
        )


@dataclass(frozen=True)
class ClientCacheConfig:
    """
    Settings applied to every client the cache builds.

    Attributes:
        endpoint_override: Default endpoint override for configs without one
        max_pool_connections: Size of each client's HTTP connection pool
    """

    endpoint_override: str | None = None
    max_pool_connections: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "endpoint_override", validate_endpoint_override(self.endpoint_override)
        )
