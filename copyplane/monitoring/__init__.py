"""
Observability for the access layer.

    >>> from copyplane.monitoring import AccessMetrics, start_metrics_server
    >>> start_metrics_server(port=8000)
    >>> cache = ClientCache(metrics=AccessMetrics())
"""

from .prometheus import (
    AccessMetrics,
    get_default_metrics,
    is_prometheus_available,
    start_metrics_server,
)

__all__ = [
    "AccessMetrics",
    "get_default_metrics",
    "is_prometheus_available",
    "start_metrics_server",
]
