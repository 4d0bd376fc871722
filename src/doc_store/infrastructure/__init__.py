"""Infrastructure layer - cross-cutting concerns."""

from doc_store.infrastructure.config import Config, get_config
from doc_store.infrastructure.logging import setup_logging, setup_logging_from_config, get_logger
from doc_store.infrastructure.metrics import setup_metrics, setup_metrics_from_config, get_metrics, MetricsRegistry
from doc_store.infrastructure.tracing import setup_tracing, setup_tracing_from_config, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    "setup_metrics",
    "setup_metrics_from_config",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "setup_tracing_from_config",
    "get_tracer",
    "trace_span",
]
