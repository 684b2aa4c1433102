"""
Transfer strategy selection.

A transfer between two object-storage locations can be executed as a
server-side copy when both sides are the same storage flavor addressed
through the same service endpoint. Everything else streams through the
orchestrator.
"""

from enum import Enum

from copyplane.storage.schema import LocationDescriptor, S3BucketSchema


class TransferStrategy(Enum):
    STREAMING = "streaming"
    DIRECT_COPY = "direct_copy"


def _same_endpoint_override(source: str | None, destination: str | None) -> bool:
    if source is None and destination is None:
        return True
    if source is None or destination is None:
        return False
    return source == destination


def is_direct_copy_eligible(
    source: LocationDescriptor, destination: LocationDescriptor | None
) -> bool:
    """
    Decide whether a transfer can run as a server-side copy.

    Requires a destination, both descriptors of the object-storage type, and
    either no endpoint override on either side or the identical override on
    both.
    """
    if destination is None:
        return False

    is_same_type = source.type == S3BucketSchema.TYPE and destination.type == S3BucketSchema.TYPE
    return is_same_type and _same_endpoint_override(
        source.endpoint_override, destination.endpoint_override
    )


def choose_strategy(
    source: LocationDescriptor, destination: LocationDescriptor | None
) -> TransferStrategy:
    if is_direct_copy_eligible(source, destination):
        return TransferStrategy.DIRECT_COPY
    return TransferStrategy.STREAMING


def destination_object_key(key: str, folder: str | None) -> str:
    """Object key of a transferred file placed into ``folder``."""
    if folder is None:
        return key
    return f"{folder}{key}" if folder.endswith("/") else f"{folder}/{key}"
