"""OpenTelemetry tracing for store operations.

Every public DocumentStore operation runs inside a span named
``doc_store.<operation>`` carrying the log path. Until setup_tracing() is
called the OpenTelemetry API hands out no-op spans, so tracing costs
nothing in embedded use.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator, Mapping

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

if TYPE_CHECKING:
    from doc_store.infrastructure.config import ObservabilityConfig

TRACER_NAME = "doc_store"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "doc_store",
    otlp_endpoint: str | None = None,
    exporter: SpanExporter | None = None,
) -> trace.Tracer:
    """
    Install a tracer provider for the store.

    Args:
        service_name: ``service.name`` resource attribute
        otlp_endpoint: OTLP gRPC collector (e.g. "http://localhost:4317");
            spans are batched to it
        exporter: Extra exporter fed synchronously, one span at a time

    Returns:
        The tracer used by trace_span()
    """
    global _tracer

    from doc_store import __version__

    resource = Resource.create({"service.name": service_name, "service.version": __version__})
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    # The global provider can only be set once per process; the store's own
    # tracer comes straight from this provider either way.
    trace.set_tracer_provider(provider)
    _tracer = provider.get_tracer(TRACER_NAME)
    return _tracer


def setup_tracing_from_config(observability: ObservabilityConfig) -> trace.Tracer:
    """Configure tracing from the observability section of the config."""
    return setup_tracing(
        service_name=observability.otel_service_name,
        otlp_endpoint=observability.otel_endpoint,
    )


def get_tracer() -> trace.Tracer:
    """The store's tracer, falling back to the global provider."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: Mapping[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Run a block inside a span.

    Attributes whose value is None are dropped. An exception escaping the
    block is recorded on the span and marks it as an error.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span
