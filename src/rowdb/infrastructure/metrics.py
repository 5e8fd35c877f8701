"""Prometheus metrics for rowdb."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all table engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Query metrics
        self.queries_total = Counter(
            "rowdb_queries_total",
            "Total number of queries executed",
            ["query_type", "status"],  # status: success, error
            registry=self._registry,
        )

        self.query_latency_seconds = Histogram(
            "rowdb_query_latency_seconds",
            "Query latency in seconds",
            ["query_type"],  # create_table, insert, select, update, delete
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        self.rows_affected_total = Counter(
            "rowdb_rows_affected_total",
            "Rows inserted, updated or deleted",
            ["query_type"],
            registry=self._registry,
        )

        # Storage metrics
        self.storage_writes_total = Counter(
            "rowdb_storage_writes_total",
            "Completed file rewrites",
            ["file_kind"],  # catalog, table
            registry=self._registry,
        )

        self.storage_write_failures_total = Counter(
            "rowdb_storage_write_failures_total",
            "File rewrites that failed and left the previous content in place",
            ["file_kind"],
            registry=self._registry,
        )

        self.storage_write_latency_seconds = Histogram(
            "rowdb_storage_write_latency_seconds",
            "Latency of a full file rewrite in seconds",
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
            registry=self._registry,
        )

        # Table metrics
        self.tables = Gauge(
            "rowdb_tables",
            "Number of tables in the catalog",
            registry=self._registry,
        )

        self.rows_stored = Gauge(
            "rowdb_rows_stored",
            "Rows currently held by a table",
            ["table"],
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "rowdb",
            "Table engine information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus scrape endpoint.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from rowdb import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
