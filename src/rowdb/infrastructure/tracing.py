"""OpenTelemetry tracing for rowdb.

Until setup_tracing() installs a provider, the global no-op tracer is
used and spans cost next to nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from rowdb import __version__
from rowdb.infrastructure.config import ObservabilityConfig

_TRACER_NAME = "rowdb"
_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "rowdb",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider and return the engine tracer.

    Args:
        service_name: Reported as service.name
        otlp_endpoint: OTLP gRPC collector, e.g. "http://localhost:4317"
        console_export: Also print finished spans to stdout

    Returns:
        The engine tracer
    """
    global _tracer

    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name, "service.version": __version__})
    )
    exporters = []
    if otlp_endpoint:
        exporters.append(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    if console_export:
        exporters.append(ConsoleSpanExporter())
    for exporter in exporters:
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    _tracer = provider.get_tracer(_TRACER_NAME, __version__)
    return _tracer


def configure_tracing(config: ObservabilityConfig) -> trace.Tracer:
    """Apply the observability section of the configuration."""
    return setup_tracing(service_name=config.otel_service_name, otlp_endpoint=config.otel_endpoint)


def get_tracer() -> trace.Tracer:
    """Get the engine tracer (the global provider's until setup_tracing runs)."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(_TRACER_NAME, __version__)
    return _tracer


@contextmanager
def trace_span(name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[trace.Span]:
    """
    Run a block inside a span named name.

    Attributes whose value is None are skipped; OpenTelemetry rejects them.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span
