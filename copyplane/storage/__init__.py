"""
copyplane storage module.

Provides:
- S3 bucket schema and location descriptors
- Connection configuration and the shared client cache
- Mandatory-field validation of location descriptors

Usage:
    from copyplane.storage import ClientCache, ClientKind, ConnectionConfig

    cache = ClientCache()
    s3 = cache.get_client(ClientKind.S3, ConnectionConfig(region="eu-west-1"))
"""

from .clients import Boto3ClientBuilder, ClientBuilder, ClientCache
from .connection import ClientCacheConfig, ClientKind, ConnectionConfig, validate_endpoint_override
from .factory import create_client_cache
from .schema import LocationDescriptor, S3BucketSchema
from .validation import (
    ValidationResult,
    Violation,
    validate_credentials,
    validate_destination,
    validate_source,
)

__all__ = [
    "Boto3ClientBuilder",
    "ClientBuilder",
    "ClientCache",
    "ClientCacheConfig",
    "ClientKind",
    "ConnectionConfig",
    "LocationDescriptor",
    "S3BucketSchema",
    "ValidationResult",
    "Violation",
    "create_client_cache",
    "validate_credentials",
    "validate_destination",
    "validate_endpoint_override",
    "validate_source",
]
