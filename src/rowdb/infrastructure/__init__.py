"""Infrastructure layer - cross-cutting concerns."""

from rowdb.infrastructure.config import (
    Config,
    ObservabilityConfig,
    StorageConfig,
    get_config,
)
from rowdb.infrastructure.logging import configure_logging, get_logger, setup_logging
from rowdb.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from rowdb.infrastructure.tracing import (
    configure_tracing,
    get_tracer,
    setup_tracing,
    trace_span,
)

__all__ = [
    "Config",
    "StorageConfig",
    "ObservabilityConfig",
    "get_config",
    "setup_logging",
    "configure_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "configure_tracing",
    "get_tracer",
    "trace_span",
]
