"""
Direct-copy transfer service.

Executes object-storage to object-storage transfers as a server-side
``copy_object`` call, so no bytes pass through the orchestrator. The source
location's ``keyName`` names the secret holding the credentials used to
sign the copy.

Usage:
    >>> service = S3CopyTransferService(cache, vault)
    >>> request = TransferRequest("process-1", source, destination)
    >>> if service.can_handle(request) and service.validate(request).succeeded:
    ...     result = service.transfer(request)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from copyplane.core.exceptions import CopyplaneError
from copyplane.core.logger import get_logger
from copyplane.secrets.tokens import resolve_secret_token
from copyplane.storage.connection import ConnectionConfig
from copyplane.storage.schema import LocationDescriptor, S3BucketSchema
from copyplane.storage.validation import (
    ValidationResult,
    Violation,
    validate_destination,
    validate_source,
)
from copyplane.transfer.eligibility import destination_object_key, is_direct_copy_eligible

if TYPE_CHECKING:
    from copyplane.monitoring.prometheus import AccessMetrics
    from copyplane.secrets.vault import SecretStore
    from copyplane.storage.clients import ClientCache

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransferRequest:
    process_id: str
    source: LocationDescriptor
    destination: LocationDescriptor | None = None


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a transfer; failures carry a message instead of raising."""

    succeeded: bool
    message: str | None = None

    @classmethod
    def success(cls, message: str | None = None) -> TransferResult:
        return cls(True, message)

    @classmethod
    def error(cls, message: str) -> TransferResult:
        return cls(False, message)


class TransferService(Protocol):
    def can_handle(self, request: TransferRequest) -> bool: ...


class S3CopyTransferService:
    """Server-side copy between two object-storage locations."""

    def __init__(
        self,
        cache: ClientCache,
        vault: SecretStore,
        metrics: AccessMetrics | None = None,
    ):
        self.cache = cache
        self.vault = vault
        self.metrics = metrics

    def can_handle(self, request: TransferRequest) -> bool:
        return is_direct_copy_eligible(request.source, request.destination)

    def validate(self, request: TransferRequest) -> ValidationResult:
        """Check both descriptors and that the source credentials resolve."""
        result = validate_source(request.source)
        if request.destination is None:
            return result.merge(
                ValidationResult([Violation("A destination is required", "destination")])
            )

        result = result.merge(validate_destination(request.destination))
        try:
            resolve_secret_token(request.source.key_name, self.vault)
        except CopyplaneError:
            result = result.merge(
                ValidationResult(
                    [
                        Violation(
                            "No credential found in vault for given key.",
                            S3BucketSchema.KEY_NAME,
                            request.source.key_name,
                        )
                    ]
                )
            )
        return result

    def transfer(self, request: TransferRequest) -> TransferResult:
        """
        Copy the source object to the destination.

        Raises:
            SecretNotFoundError: If the source credentials cannot be found
            SecretFormatError: If the stored credentials are malformed
            ConfigurationError: If no client can be built for the source
        """
        source, destination = request.source, request.destination
        if destination is None:
            return TransferResult.error("A destination is required for a direct copy")

        source_bucket = source.get(S3BucketSchema.BUCKET_NAME)
        source_key = source.get(S3BucketSchema.OBJECT_NAME)
        # TODO: copy every object under objectPrefix, not just a single object
        if source_key is None:
            return TransferResult.error(
                f"Direct copy needs '{S3BucketSchema.OBJECT_NAME}' on the source"
            )

        token = resolve_secret_token(source.key_name, self.vault, metrics=self.metrics)
        client = self.cache.s3_client(ConnectionConfig.from_location(source, credentials=token))

        destination_bucket = destination.get(S3BucketSchema.BUCKET_NAME)
        destination_key = destination_object_key(
            destination.get(S3BucketSchema.OBJECT_NAME, source_key),
            destination.get(S3BucketSchema.FOLDER_NAME),
        )

        try:
            client.copy_object(
                CopySource={"Bucket": source_bucket, "Key": source_key},
                Bucket=destination_bucket,
                Key=destination_key,
            )
        except (ClientError, BotoCoreError) as e:
            message = f"Exception during S3 copy operation: {e}"
            logger.error(f"[{request.process_id}] {message}")
            if self.metrics:
                self.metrics.record_copy("error")
            return TransferResult.error(message)

        logger.info(
            f"[{request.process_id}] Successfully copied S3 object "
            f"{source_bucket}/{source_key} to {destination_bucket}/{destination_key}."
        )
        if self.metrics:
            self.metrics.record_copy("success")
        return TransferResult.success()


def select_transfer_service(
    request: TransferRequest,
    services: Iterable[TransferService],
    fallback: TransferService | None = None,
) -> TransferService | None:
    """First service able to handle the request, else ``fallback``."""
    for service in services:
        if service.can_handle(request):
            return service
    return fallback
