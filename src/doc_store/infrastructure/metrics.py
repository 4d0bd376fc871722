"""Prometheus metrics for the document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

if TYPE_CHECKING:
    from doc_store.infrastructure.config import ObservabilityConfig


class MetricsRegistry:
    """Registry of all document store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "docstore_operations_total",
            "Total number of store operations",
            ["operation", "status"],  # operation: find, insert, delete, load
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "docstore_operation_latency_seconds",
            "Store operation latency in seconds",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Log metrics
        self.records_loaded_total = Counter(
            "docstore_records_loaded_total",
            "Total live records decoded from the log",
            registry=self._registry,
        )

        self.corrupt_records_total = Counter(
            "docstore_corrupt_records_total",
            "Total live lines that failed to decode",
            registry=self._registry,
        )

        self.records_tombstoned_total = Counter(
            "docstore_records_tombstoned_total",
            "Total records marked deleted",
            registry=self._registry,
        )

        self.bytes_appended_total = Counter(
            "docstore_bytes_appended_total",
            "Total bytes appended to the log",
            registry=self._registry,
        )

        # Write coordination metrics
        self.lock_wait_seconds = Histogram(
            "docstore_lock_wait_seconds",
            "Time spent waiting for the exclusive write section",
            buckets=(0.0001, 0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 30.0),
            registry=self._registry,
        )

        self.lock_timeouts_total = Counter(
            "docstore_lock_timeouts_total",
            "Total writers that gave up waiting for the exclusive section",
            registry=self._registry,
        )

        self.writers_busy = Gauge(
            "docstore_writers_busy",
            "Number of stores currently holding the exclusive write section",
            registry=self._registry,
        )

        from doc_store import __version__

        self.info = Info(
            "docstore_build",
            "Document store build information",
            registry=self._registry,
        )
        self.info.info({"version": __version__})

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry the metrics are registered on."""
        return self._registry


_metrics: MetricsRegistry | None = None


def setup_metrics(
    port: int = 8001,
    registry: CollectorRegistry | None = None,
    serve: bool = True,
) -> MetricsRegistry:
    """
    Install the process-wide metrics registry used by stores.

    Args:
        port: Port of the Prometheus scrape endpoint
        registry: Collector registry (defaults to the global REGISTRY)
        serve: Start the HTTP scrape endpoint; embedded users that export
            metrics some other way pass False
    """
    global _metrics
    target = registry or REGISTRY
    # Collectors can be registered only once per CollectorRegistry.
    if _metrics is None or _metrics.registry is not target:
        _metrics = MetricsRegistry(target)
    if serve:
        start_http_server(port, registry=target)
    return _metrics


def setup_metrics_from_config(
    observability: ObservabilityConfig, registry: CollectorRegistry | None = None
) -> MetricsRegistry:
    """Serve metrics on the configured port."""
    return setup_metrics(observability.metrics_port, registry)


def get_metrics() -> MetricsRegistry:
    """Registry used by stores created without an explicit one."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
