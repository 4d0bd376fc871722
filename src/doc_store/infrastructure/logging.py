"""Structured logging for the store.

Events are snake_case names (``store_opened``, ``records_tombstoned``)
with key/value context. Every logger created through get_logger() carries
a ``component`` key naming the module it belongs to.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from doc_store.infrastructure.config import ObservabilityConfig


def _add_library_version(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    from doc_store import __version__

    event_dict.setdefault("doc_store_version", __version__)
    return event_dict


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    stream: IO[str] | None = None,
) -> None:
    """
    Configure structlog for the store.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: 'json' for one object per line, 'console' for humans
        stream: Destination of rendered events (defaults to stdout)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")
    stream = stream or sys.stdout

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_library_version,
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


def setup_logging_from_config(observability: ObservabilityConfig) -> None:
    """Configure logging from the observability section of the config."""
    setup_logging(level=observability.log_level, log_format=observability.log_format)


def get_logger(name: str | None = None, **initial_context: Any) -> Any:
    """
    Get a lazily configured logger.

    The logger is assembled on first use, so module-level loggers pick up
    a setup_logging() call made after import.

    Args:
        name: Module name, bound as the ``component`` key
        **initial_context: Extra context carried by every event
    """
    if name:
        initial_context.setdefault("component", name)
    return structlog.get_logger(name, **initial_context)
