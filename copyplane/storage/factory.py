"""
Client Cache Factory - builds a ClientCache from access settings.

Settings default to the global ones (see ``copyplane.core.config.configure``),
and Prometheus metrics are attached when ``metrics_enabled`` is set, so
callers don't need to wire configuration and observability by hand.
"""

from copyplane.core.config import AccessSettings, get_settings
from copyplane.monitoring.prometheus import AccessMetrics, get_default_metrics
from copyplane.storage.clients import ClientBuilder, ClientCache


def create_client_cache(
    settings: AccessSettings | None = None,
    *,
    metrics: AccessMetrics | None = None,
    builder: ClientBuilder | None = None,
) -> ClientCache:
    """
    Create a client cache configured from access settings.

    Args:
        settings: Settings to apply; the global settings when None
        metrics: Collector to attach; the shared default collector when None
            and ``settings.metrics_enabled`` is set
        builder: Client builder override, boto3 when None

    Example:
        >>> configure(AccessSettings.from_env())
        >>> cache = create_client_cache()
        >>> vault = create_vault(cache)
    """
    settings = settings or get_settings()
    if metrics is None and settings.metrics_enabled:
        metrics = get_default_metrics()
    return ClientCache(settings.client_cache_config(), builder=builder, metrics=metrics)
