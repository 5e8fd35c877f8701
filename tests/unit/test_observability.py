"""Unit tests for logging, tracing and engine observability hooks."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from structlog.testing import capture_logs

from rowdb.application import TableEngine
from rowdb.domain.entities import SelectQuery
from rowdb.infrastructure import tracing
from rowdb.infrastructure.config import ObservabilityConfig
from rowdb.infrastructure.logging import configure_logging, setup_logging


@pytest.mark.unit
class TestSetupLogging:
    """setup_logging picks the renderer from the format."""

    def test_json_renderer(self) -> None:
        with patch("rowdb.infrastructure.logging.structlog.configure") as configure, patch(
            "rowdb.infrastructure.logging.logging.basicConfig"
        ):
            setup_logging(level="DEBUG", log_format="json")

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_from_config(self) -> None:
        with patch("rowdb.infrastructure.logging.structlog.configure") as configure, patch(
            "rowdb.infrastructure.logging.logging.basicConfig"
        ):
            configure_logging(ObservabilityConfig(log_format="console"))

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


@pytest.mark.unit
class TestEngineEvents:
    def test_mutation_and_failure_events(self, planets: TableEngine) -> None:
        with capture_logs() as logs:
            planets.delete("planets")
            planets.execute(SelectQuery("missing"))

        events = {entry["event"]: entry for entry in logs}
        assert events["rows_deleted"]["count"] == 3
        assert events["query_failed"]["error_kind"] == "UnknownTable"
        assert events["query_failed"]["log_level"] == "warning"


@pytest.mark.unit
class TestTracing:
    def test_execute_runs_in_span(self, planets: TableEngine) -> None:
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))

        with patch.object(tracing, "_tracer", provider.get_tracer("test")):
            planets.execute(SelectQuery("planets"))

        (span,) = exporter.get_finished_spans()
        assert span.name == "rowdb.select"
        assert span.attributes["rowdb.table"] == "planets"
