"""Prometheus metrics for the container panel."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all container panel metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Engine gateway metrics
        self.engine_requests_total = Counter(
            "engine_requests_total",
            "Total requests issued to the container engine",
            ["operation", "outcome"],  # ok, unavailable, upstream_error, timeout, malformed
            registry=self._registry,
        )

        self.engine_request_duration_seconds = Histogram(
            "engine_request_duration_seconds",
            "Container engine request latency in seconds",
            ["operation"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self._registry,
        )

        # API metrics
        self.api_errors_total = Counter(
            "api_errors_total",
            "Requests answered with a collapsed error response",
            ["endpoint"],
            registry=self._registry,
        )

        self.resources_listed = Histogram(
            "resources_listed",
            "Number of records returned per collection request",
            ["kind"],  # containers, images, volumes
            buckets=(0, 1, 5, 10, 25, 50, 100, 250, 500),
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "container_panel",
            "Container panel information",
            registry=self._registry,
        )


_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 9102, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """Set up Prometheus metrics server."""
    global _metrics
    _metrics = MetricsRegistry(registry)

    from container_panel import __version__
    _metrics.info.info({"version": __version__})

    start_http_server(port, registry=registry or REGISTRY)
    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the process-wide metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
