# ============================================
# FILE: copyplane/monitoring/prometheus.py
# ============================================

"""
Prometheus metrics integration for copyplane.

Quick Start:
    >>> from copyplane.monitoring.prometheus import AccessMetrics, start_metrics_server
    >>>
    >>> start_metrics_server(port=8000)
    >>> metrics = AccessMetrics()
    >>> cache = ClientCache(metrics=metrics)

Requirements:
    pip install prometheus-client
"""

from typing import Any

from copyplane.core.logger import get_logger
from copyplane.secrets.tokens import SecretToken, TemporarySecretToken

# Check if prometheus_client is installed
try:
    from prometheus_client import REGISTRY, Counter, start_http_server

    PROMETHEUS_AVAILABLE = True
except ImportError:  # pragma: no cover
    PROMETHEUS_AVAILABLE = False
    REGISTRY: Any = None  # type: ignore[no-redef]
    Counter: Any = None  # type: ignore[no-redef]
    start_http_server: Any = None  # type: ignore[no-redef]


logger = get_logger(__name__)


class AccessMetrics:
    """
    Prometheus-compatible metrics collector for the access layer.

    Exposes the following metrics:
        - <prefix>_clients_created_total: Clients built by the cache, by kind
        - <prefix>_secrets_resolved_total: Tokens resolved, by variant
        - <prefix>_secret_resolution_failures_total: Failed resolutions, by reason
        - <prefix>_keys_sanitized_total: Key names rewritten by the sanitizer
        - <prefix>_copy_transfers_total: Direct copies, by outcome
    """

    def __init__(self, prefix: str = "copyplane", registry: Any = None, enabled: bool = True):
        """
        Initialize Prometheus metrics.

        Args:
            prefix: Metric name prefix (default: "copyplane")
            registry: Collector registry; the global default when None
            enabled: Collect nothing when False
        """
        if enabled and not PROMETHEUS_AVAILABLE:
            logger.warning(
                "prometheus-client not installed. Metrics will not be collected. "
                "Install with: pip install prometheus-client"
            )
        self._enabled = enabled and PROMETHEUS_AVAILABLE
        if not self._enabled:
            return

        self._prefix = prefix
        registry = registry if registry is not None else REGISTRY

        self._clients_created = Counter(
            f"{prefix}_clients_created_total",
            "Service clients built by the client cache",
            ["kind"],
            registry=registry,
        )
        self._secrets_resolved = Counter(
            f"{prefix}_secrets_resolved_total",
            "Credential tokens resolved from the secret store",
            ["variant"],
            registry=registry,
        )
        self._secret_failures = Counter(
            f"{prefix}_secret_resolution_failures_total",
            "Secret resolutions that failed",
            ["reason"],
            registry=registry,
        )
        self._keys_sanitized = Counter(
            f"{prefix}_keys_sanitized_total",
            "Secret key names rewritten by the sanitizer",
            registry=registry,
        )
        self._copy_transfers = Counter(
            f"{prefix}_copy_transfers_total",
            "Server-side copy transfers",
            ["outcome"],
            registry=registry,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    def record_client_created(self, kind: str) -> None:
        if not self._enabled:
            return
        self._clients_created.labels(kind=kind).inc()

    def record_secret_resolved(self, token: SecretToken) -> None:
        if not self._enabled:
            return
        variant = "temporary" if isinstance(token, TemporarySecretToken) else "static"
        self._secrets_resolved.labels(variant=variant).inc()

    def record_secret_failure(self, reason: str) -> None:
        if not self._enabled:
            return
        self._secret_failures.labels(reason=reason).inc()

    def record_key_sanitized(self) -> None:
        if not self._enabled:
            return
        self._keys_sanitized.inc()

    def record_copy(self, outcome: str) -> None:
        if not self._enabled:
            return
        self._copy_transfers.labels(outcome=outcome).inc()


def start_metrics_server(port: int = 8000, addr: str = "0.0.0.0") -> None:
    """
    Start a Prometheus HTTP metrics server.

    Args:
        port: Port to listen on (default: 8000)
        addr: Address to bind to (default: 0.0.0.0 for all interfaces)
    """
    if not PROMETHEUS_AVAILABLE:
        logger.error(
            "Cannot start metrics server: prometheus-client not installed. "
            "Install with: pip install prometheus-client"
        )
        return

    start_http_server(port, addr)
    logger.info(f"Prometheus metrics server started on port {port}")


def is_prometheus_available() -> bool:
    """Check if prometheus-client is installed."""
    return PROMETHEUS_AVAILABLE


# Shared collector on the global registry, built on first use
_default_metrics: AccessMetrics | None = None


def get_default_metrics() -> AccessMetrics:
    """
    Get the process-wide AccessMetrics registered on the default registry.

    Counters can only be registered once per registry, so every component
    that collects into the global registry shares this instance.
    """
    global _default_metrics
    if _default_metrics is None:
        _default_metrics = AccessMetrics()
    return _default_metrics
