"""Pytest configuration and fixtures for rowdb tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from rowdb.application import TableEngine
from rowdb.domain.entities import ColumnSpec
from rowdb.infrastructure.config import Config, StorageConfig
from rowdb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(
        storage=StorageConfig(
            data_dir=temp_dir / "data",
            sync_mode="none",  # Faster for tests
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def engine(
    test_config: Config, metrics_registry: MetricsRegistry
) -> Generator[TableEngine, None, None]:
    """Provide an open table engine on the test data directory."""
    with TableEngine(config=test_config, metrics=metrics_registry) as e:
        yield e


@pytest.fixture
def planets(engine: TableEngine) -> TableEngine:
    """Engine with a 'planets' table (id integer, name string) holding three rows."""
    engine.create_table(
        "planets", [ColumnSpec("id", "integer"), ColumnSpec("name", "string")]
    )
    engine.insert("planets", ["id", "name"], [[1, "Mercury"], [2, "Venus"], [3, "Earth"]])
    return engine


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "chaos: Chaos/fault injection tests")
