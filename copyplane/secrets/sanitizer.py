"""
Secret key name sanitation.

Secrets Manager accepts key names made of ``[A-Za-z0-9/_+.@-]`` up to 512
characters. ``sanitize_key`` maps any string onto that set: illegal
characters become ``-`` and over-long keys are cut, and whenever the key had
to change, ``_<hash>`` of the original string is appended so that different
inputs keep landing on different names. The mapping is many-to-one; hash
collisions stay possible.

Keys that are already valid come back unchanged, so sanitizing twice is the
same as sanitizing once.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from copyplane.core.config import AWS_KEY_SIZE_LIMIT, MIN_KEY_SIZE_LIMIT
from copyplane.core.logger import get_logger

if TYPE_CHECKING:
    from copyplane.monitoring.prometheus import AccessMetrics

logger = get_logger(__name__)

_INVALID_CHARACTER = re.compile(r"[^A-Za-z0-9/_+.@-]")


def java_string_hash(value: str) -> int:
    """
    32-bit signed polynomial hash (``h = 31 * h + c``) over UTF-16 code units.

    Stable across processes and interpreters, unlike the builtin ``hash``,
    which is salted per process for strings.
    """
    h = 0
    data = value.encode("utf-16-be", errors="surrogatepass")
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def _check_limit(limit: int) -> None:
    if limit < MIN_KEY_SIZE_LIMIT:
        msg = f"Key size limit {limit} leaves no room for the hash suffix"
        raise ValueError(msg)


def is_valid_key(key: str, limit: int = AWS_KEY_SIZE_LIMIT) -> bool:
    """True when the key needs no sanitation."""
    return len(key) <= limit and _INVALID_CHARACTER.search(key) is None


def sanitize_key(
    original_key: str,
    limit: int = AWS_KEY_SIZE_LIMIT,
    metrics: AccessMetrics | None = None,
) -> str:
    """
    Map any string onto a valid secret key name.

    Args:
        original_key: Key as requested by the caller
        limit: Maximum key name length

    Raises:
        ValueError: If ``limit`` cannot hold the ``_<hash>`` suffix

    Returns:
        ``original_key`` itself when already valid, otherwise the cleaned key
        followed by ``_`` and the hash of ``original_key``; never longer than
        ``limit``
    """
    _check_limit(limit)
    replaced, replacements = _INVALID_CHARACTER.subn("-", original_key)
    if replacements == 0 and len(original_key) <= limit:
        return original_key

    # hash the full original so long keys sharing a prefix stay apart
    suffix = f"_{java_string_hash(original_key)}"
    sanitized = replaced[: limit - len(suffix)] + suffix

    logger.warning(
        "Secret key name reduced in length or stripped of illegal characters: "
        f"'{original_key[:64]}' -> '{sanitized[:64]}' (length {len(original_key)} -> {len(sanitized)})"
    )
    if metrics:
        metrics.record_key_sanitized()
    return sanitized


class KeySanitizer:
    """
    Sanitation strategy bundling the key length limit and observability.

    Example:
        >>> sanitizer = KeySanitizer()
        >>> sanitizer("invalid#key")
        'invalid-key_-954620461'
    """

    def __init__(self, limit: int = AWS_KEY_SIZE_LIMIT, metrics: AccessMetrics | None = None):
        _check_limit(limit)
        self.limit = limit
        self.metrics = metrics

    def __call__(self, original_key: str) -> str:
        return sanitize_key(original_key, limit=self.limit, metrics=self.metrics)

    def is_valid(self, key: str) -> bool:
        return is_valid_key(key, limit=self.limit)
