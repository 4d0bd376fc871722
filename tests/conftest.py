"""Pytest configuration and fixtures for doc_store tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from doc_store.application import DocumentStore
from doc_store.infrastructure.config import Config, QueryConfig, StorageConfig
from doc_store.infrastructure.metrics import MetricsRegistry


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
        query=QueryConfig(lock_timeout_seconds=5.0),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def log_path(temp_dir: Path) -> Path:
    """Location of the log file used by store tests."""
    return temp_dir / "records.log"


@pytest.fixture
def make_store(
    test_config: Config,
    metrics_registry: MetricsRegistry,
    log_path: Path,
) -> Callable[..., DocumentStore]:
    """Factory for stores over ``log_path`` with query settings overridable."""

    def factory(full_text_fields: tuple[str, ...] = (), **query_overrides: Any) -> DocumentStore:
        config = test_config.model_copy(
            update={"query": test_config.query.model_copy(update=query_overrides)}
        )
        return DocumentStore(
            log_path,
            full_text_fields,
            config=config,
            metrics=metrics_registry,
        )

    return factory


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
