"""
Secret handling: credential tokens, key sanitation and secret stores.
"""

from .sanitizer import KeySanitizer, is_valid_key, java_string_hash, sanitize_key
from .tokens import (
    SecretToken,
    StaticSecretToken,
    TemporarySecretToken,
    credential_kwargs,
    parse_secret_token,
    resolve_secret_token,
)
from .vault import InMemoryVault, SecretsManagerVault, SecretStore, create_vault

__all__ = [
    "InMemoryVault",
    "KeySanitizer",
    "SecretStore",
    "SecretToken",
    "SecretsManagerVault",
    "StaticSecretToken",
    "TemporarySecretToken",
    "create_vault",
    "credential_kwargs",
    "is_valid_key",
    "java_string_hash",
    "parse_secret_token",
    "resolve_secret_token",
    "sanitize_key",
]
