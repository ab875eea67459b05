"""OpenTelemetry tracing for engine calls."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

SERVICE_NAME = "container_panel"

_tracer: trace.Tracer | None = None


def setup_tracing(service_name: str, otlp_endpoint: str) -> trace.Tracer:
    """Export spans to an OTLP collector.

    Args:
        service_name: Reported ``service.name``.
        otlp_endpoint: Collector gRPC endpoint, e.g. "localhost:4317".

    Returns:
        The tracer used for engine spans.
    """
    global _tracer

    from container_panel import __version__

    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name, "service.version": __version__})
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)))
    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the panel tracer; a no-op tracer until tracing is set up."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SERVICE_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
    tracer: trace.Tracer | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span carrying the given attributes."""
    with (tracer or get_tracer()).start_as_current_span(name, attributes=attributes) as span:
        yield span
