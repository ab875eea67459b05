"""Infrastructure layer - cross-cutting concerns."""

from container_panel.infrastructure.config import Config, get_config
from container_panel.infrastructure.container import Container
from container_panel.infrastructure.logging import setup_logging, get_logger
from container_panel.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from container_panel.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "Container",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
