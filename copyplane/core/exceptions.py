# ============================================
# FILE: copyplane/core/exceptions.py
# ============================================

"""
Unified error hierarchy for copyplane.

All exceptions raised by the access layer inherit from CopyplaneError,
carrying a human-readable message and a ``details`` dict that is rendered
into ``str(error)`` for logs.
"""

from typing import Any


class CopyplaneError(Exception):
    """
    Base exception for all access-layer operations.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigurationError(CopyplaneError):
    """
    Malformed client configuration.

    Raised when:
    - Region is blank or not a valid region identifier
    - Endpoint override is not an absolute http(s) URL
    - The storage SDK rejects the configuration
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        field: str | None = None,
        value: Any = None,
        **details,
    ):
        super().__init__(message, details={"field": field, "value": value, **details})
        self.field = field
        self.value = value


class SecretError(CopyplaneError):
    """Base error for secret resolution."""

    def __init__(self, message: str, key_name: str | None = None, **details):
        super().__init__(message, details={"key_name": key_name, **details})
        self.key_name = key_name


class SecretNotFoundError(SecretError):
    """
    Secret could not be located.

    Raised when:
    - The key name is None or blank
    - The store holds no value under the key
    - The stored value is blank
    """


class SecretFormatError(SecretError):
    """Secret payload cannot be decoded into a credential token."""


class SecretStoreError(SecretError):
    """The secret store itself failed while serving a request."""

    def __init__(
        self,
        message: str = "Secret store operation failed",
        key_name: str | None = None,
        operation: str | None = None,
        **details,
    ):
        super().__init__(message, key_name=key_name, operation=operation, **details)
        self.operation = operation

