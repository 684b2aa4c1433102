"""
Transfer strategy selection and the direct-copy transfer service.
"""

from .copy_service import (
    S3CopyTransferService,
    TransferRequest,
    TransferResult,
    TransferService,
    select_transfer_service,
)
from .eligibility import (
    TransferStrategy,
    choose_strategy,
    destination_object_key,
    is_direct_copy_eligible,
)

__all__ = [
    "S3CopyTransferService",
    "TransferRequest",
    "TransferResult",
    "TransferService",
    "TransferStrategy",
    "choose_strategy",
    "destination_object_key",
    "is_direct_copy_eligible",
    "select_transfer_service",
]
