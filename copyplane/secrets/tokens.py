"""
Credential tokens and their resolution from a secret store.

A secret holds a JSON document in one of two shapes:

    {"accessKeyId": "...", "secretAccessKey": "..."}
    {"accessKeyId": "...", "secretAccessKey": "...", "sessionToken": "...", "expiration": 0}

The presence of ``sessionToken`` alone decides which token type is built.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from copyplane.core.exceptions import SecretFormatError, SecretNotFoundError
from copyplane.core.logger import get_logger

if TYPE_CHECKING:
    from copyplane.monitoring.prometheus import AccessMetrics
    from copyplane.secrets.vault import SecretStore

logger = get_logger(__name__)

SESSION_TOKEN_FIELD = "sessionToken"


@dataclass(frozen=True)
class StaticSecretToken:
    """Long-lived access key pair."""

    access_key_id: str
    secret_access_key: str = field(repr=False)

    def to_json(self) -> str:
        return json.dumps(
            {"accessKeyId": self.access_key_id, "secretAccessKey": self.secret_access_key}
        )


@dataclass(frozen=True)
class TemporarySecretToken:
    """Short-lived session credentials."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: int | None = None

    def to_json(self) -> str:
        payload: dict[str, Any] = {
            "accessKeyId": self.access_key_id,
            "secretAccessKey": self.secret_access_key,
            "sessionToken": self.session_token,
        }
        if self.expiration is not None:
            payload["expiration"] = self.expiration
        return json.dumps(payload)


SecretToken = StaticSecretToken | TemporarySecretToken


def _required(document: dict[str, Any], name: str, key_name: str | None) -> str:
    value = document.get(name)
    if not isinstance(value, str) or not value.strip():
        msg = f"Secret is missing required field '{name}'"
        raise SecretFormatError(msg, key_name=key_name)
    return value


def parse_secret_token(raw: str, key_name: str | None = None) -> SecretToken:
    """
    Decode a secret payload into a credential token.

    Args:
        raw: JSON text read from the secret store
        key_name: Secret name, only used for error reporting

    Raises:
        SecretFormatError: If the payload is not a JSON object of either shape
    """
    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as e:
        msg = "Secret is not valid JSON"
        raise SecretFormatError(msg, key_name=key_name) from e

    if not isinstance(document, dict):
        msg = "Secret must be a JSON object"
        raise SecretFormatError(msg, key_name=key_name)

    access_key_id = _required(document, "accessKeyId", key_name)
    secret_access_key = _required(document, "secretAccessKey", key_name)

    if SESSION_TOKEN_FIELD not in document:
        return StaticSecretToken(access_key_id, secret_access_key)

    session_token = _required(document, SESSION_TOKEN_FIELD, key_name)
    expiration = document.get("expiration")
    if expiration is not None and (isinstance(expiration, bool) or not isinstance(expiration, int)):
        msg = "Secret field 'expiration' must be an integer"
        raise SecretFormatError(msg, key_name=key_name)

    return TemporarySecretToken(access_key_id, secret_access_key, session_token, expiration)


def resolve_secret_token(
    key_name: str | None,
    store: SecretStore,
    metrics: AccessMetrics | None = None,
) -> SecretToken:
    """
    Read a secret from the store and decode it into a credential token.

    Raises:
        SecretNotFoundError: If the key is blank, the store has no value
            for it, or the value is blank
        SecretFormatError: If the value cannot be decoded
    """
    try:
        if key_name is None or not key_name.strip():
            msg = "Failed to resolve secret: no key name given"
            raise SecretNotFoundError(msg, key_name=key_name)

        secret = store.resolve_secret(key_name)
        if secret is None or not secret.strip():
            msg = f"Failed to resolve secret with key '{key_name}'"
            raise SecretNotFoundError(msg, key_name=key_name)

        token = parse_secret_token(secret, key_name=key_name)
    except SecretNotFoundError:
        if metrics:
            metrics.record_secret_failure("not_found")
        raise
    except SecretFormatError:
        if metrics:
            metrics.record_secret_failure("format")
        raise

    logger.debug(f"Resolved {type(token).__name__} from secret '{key_name}'")
    if metrics:
        metrics.record_secret_resolved(token)
    return token


def credential_kwargs(token: SecretToken | None) -> dict[str, str]:
    """boto3 client keyword arguments for a token; empty for the ambient chain."""
    match token:
        case None:
            return {}
        case TemporarySecretToken(access_key_id=key_id, secret_access_key=secret, session_token=session):
            return {
                "aws_access_key_id": key_id,
                "aws_secret_access_key": secret,
                "aws_session_token": session,
            }
        case StaticSecretToken(access_key_id=key_id, secret_access_key=secret):
            return {"aws_access_key_id": key_id, "aws_secret_access_key": secret}
        case _:
            msg = f"Secret token {type(token).__name__} is not supported"
            raise TypeError(msg)
