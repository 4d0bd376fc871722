"""Document Store - unified entry point for the log-backed database.

This module provides the DocumentStore class that ties together the log
storage, the log codec, the query parser/compiler and the result pipeline.

Usage:
    from doc_store.application import DocumentStore

    store = DocumentStore("users.log", full_text_fields=["bio"])

    await store.insert({"name": "a", "age": 3})
    adults = await store.find({"age": {"$gt": 2}}, {"sort": {"age": -1}})
    removed = await store.delete({"name": {"$eq": "a"}})

Concurrency:
    Writes (insert/delete) run inside an exclusive section guarded by an
    asyncio.Lock, so overlapping writes from tasks of the same event loop
    never interleave. The lock is process-local: it does not protect the
    file against other processes. Reads are not excluded from writes and
    may observe the log before or after a concurrent write.

    File I/O runs in the loop's default executor, so waiting for the disk
    never blocks other tasks.

Caching:
    cache_policy="reload" re-reads the log on every find().
    cache_policy="cache" reads it on the first find() and keeps the records
    until a local insert/delete invalidates them; changes made by other
    processes are not seen until then.
"""

from __future__ import annotations

import asyncio
import copy
import functools
import time
from collections.abc import Iterable, Iterator, Mapping
from contextlib import asynccontextmanager, contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Callable, TypeVar

from doc_store.adapters.outbound.file_log_storage import FileLogStorage
from doc_store.domain.entities import FindOptions
from doc_store.domain.errors import WriteLockTimeoutError
from doc_store.domain.services import log_codec, result_pipeline
from doc_store.domain.services.log_codec import CorruptRecordPolicy
from doc_store.domain.services.predicate_compiler import Predicate, PredicateCompiler
from doc_store.domain.services.query_parser import QueryParser
from doc_store.domain.value_objects import Record
from doc_store.infrastructure.config import Config, get_config
from doc_store.infrastructure.logging import get_logger
from doc_store.infrastructure.metrics import MetricsRegistry, get_metrics
from doc_store.infrastructure.tracing import trace_span
from doc_store.ports.outbound.log_storage import LogStorage, SyncMode

logger = get_logger(__name__)

T = TypeVar("T")


class StoreState(Enum):
    """Whether a writer currently holds the exclusive section."""

    IDLE = "idle"
    BUSY = "busy"


class CachePolicy(Enum):
    """When find() re-reads the log."""

    RELOAD = "reload"
    CACHE = "cache"


async def acquire_within(lock: asyncio.Lock, timeout: float) -> bool:
    """Acquire ``lock`` within ``timeout`` seconds.

    Returns False on timeout, in which case the lock is not held by the
    caller. The acquisition runs as its own task so that a grant racing the
    timeout is either returned or cancelled, never leaked.
    """
    acquire = asyncio.ensure_future(lock.acquire())
    try:
        await asyncio.wait({acquire}, timeout=timeout)
    except asyncio.CancelledError:
        _abandon(acquire, lock)
        raise
    if acquire.done():
        return acquire.result()
    _abandon(acquire, lock)
    return False


def _abandon(acquire: asyncio.Future, lock: asyncio.Lock) -> None:
    # A pending Lock.acquire() that is cancelled never takes the lock.
    if acquire.done():
        lock.release()
    else:
        acquire.cancel()


class DocumentStore:
    """Embedded document store over a tagged, line-oriented log.

    Features:
        - Append-only inserts, one JSON line per record
        - Non-destructive deletes via tombstone tags
        - Declarative queries: $eq, $gt, $lt, $in, $text, $and, $or
        - Sort and projection of results

    Thread Safety:
        Designed for tasks sharing a single event loop. Do not share an
        instance across event loops running in parallel threads.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        full_text_fields: Iterable[str] = (),
        *,
        config: Config | None = None,
        storage: LogStorage | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Open a store.

        Args:
            path: Log file location. Defaults to the configured
                ``storage.data_dir / storage.log_filename``.
            full_text_fields: Fields searched by ``$text`` queries.
            config: Store configuration (defaults to the global config).
            storage: Custom LogStorage; overrides ``path``.
            metrics: Metrics registry (defaults to the global registry).

        Raises:
            LogStorageError: If the log must be created and cannot be.
        """
        self._config = config if config is not None else get_config()
        storage_config = self._config.storage
        query_config = self._config.query

        if storage is None:
            if path is None:
                self._config.ensure_directories()
                path = storage_config.log_path
            storage = FileLogStorage(path, SyncMode(storage_config.sync_mode))
        self._storage = storage

        if storage_config.create_if_missing and not self._storage.exists():
            self._storage.create()

        self._parser = QueryParser(strict=query_config.strict_operators)
        self._compiler = PredicateCompiler(full_text_fields)
        self._corrupt_policy = CorruptRecordPolicy(query_config.corrupt_record_policy)
        self._cache_policy = CachePolicy(query_config.cache_policy)
        self._lock_timeout = query_config.lock_timeout_seconds
        self._metrics = metrics if metrics is not None else get_metrics()

        self._rows: list[Record] = []
        self._cache_valid = False
        self._generation = 0

        self._write_lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

        self._log = logger.bind(path=str(self._storage.path))
        self._log.info(
            "store_opened",
            cache_policy=self._cache_policy.value,
            strict_operators=self._parser.strict,
            full_text_fields=list(self._compiler.full_text_fields),
        )

    @property
    def path(self) -> Path:
        return self._storage.path

    @property
    def full_text_fields(self) -> tuple[str, ...]:
        return self._compiler.full_text_fields

    @property
    def cache_policy(self) -> CachePolicy:
        return self._cache_policy

    @property
    def state(self) -> StoreState:
        """BUSY while a writer holds the exclusive section."""
        if self._write_lock is not None and self._write_lock.locked():
            return StoreState.BUSY
        return StoreState.IDLE

    # =========================================================================
    # Public API
    # =========================================================================

    async def load(self) -> list[Record]:
        """Read every live record from the log and refresh the cache.

        Raises:
            LogStorageError: If the log cannot be read.
            CorruptRecordError: If a live line cannot be decoded and the
                corrupt-record policy is "raise".
        """
        with self._observe("load"):
            rows = await self._reload()
        return copy.deepcopy(rows)

    async def find(
        self,
        query: Mapping[str, Any] | None = None,
        options: FindOptions | Mapping[str, Any] | None = None,
    ) -> list[Record]:
        """Return the live records matching ``query``, shaped by ``options``.

        Args:
            query: Query document; None or {} matches every record.
            options: FindOptions or ``{"sort": {...}, "projection": [...]}``.

        Returns:
            Matching records (or projections of them), filtered in log
            order, then sorted, then projected.

        Raises:
            MalformedQueryError: If the query or options are malformed.
            LogStorageError: If the log cannot be read.
            CorruptRecordError: Under the "raise" corrupt-record policy.
        """
        with self._observe("find"):
            find_options = options if isinstance(options, FindOptions) else FindOptions.from_mapping(options)
            predicate = self._compile(query)
            rows = await self._records()
            result = result_pipeline.run(rows, predicate, find_options)

        self._log.debug("find_completed", matched=len(result), scanned=len(rows))
        return result

    async def insert(self, record: Mapping[str, Any]) -> None:
        """Append one record to the log.

        Raises:
            InvalidRecordError: If the record cannot be encoded as one line.
            WriteLockTimeoutError: If the exclusive section is not acquired.
            LogStorageError: If the append fails (the log is left unchanged).
        """
        with self._observe("insert"):
            line = log_codec.encode_record(record)
            async with self._exclusive():
                existing = await self._run_io(self._storage.read_text)
                written = await self._run_io(
                    self._storage.append, log_codec.append_text(existing, line)
                )
                self._invalidate()

        self._metrics.bytes_appended_total.inc(written)
        self._log.debug("record_inserted", bytes=written)

    async def delete(self, query: Mapping[str, Any] | None) -> int:
        """Tombstone every live record matching ``query``.

        The log is rewritten atomically, and only when at least one record
        matched. Running the same delete again matches nothing and leaves
        the file byte-for-byte unchanged.

        Returns:
            Number of records tombstoned.

        Raises:
            MalformedQueryError: If the query is malformed.
            WriteLockTimeoutError: If the exclusive section is not acquired.
            LogStorageError: If the log cannot be read or rewritten.
            CorruptRecordError: Under the "raise" corrupt-record policy.
        """
        with self._observe("delete"):
            predicate = self._compile(query)
            async with self._exclusive():
                text = await self._run_io(self._storage.read_text)
                entries = log_codec.parse_entries(text)
                matched = {
                    entry.position
                    for entry, row in log_codec.iter_live(entries, self._corrupt_policy)
                    if predicate(row)
                }
                if matched:
                    lines = [
                        entry.tombstoned().line if entry.position in matched else entry.line
                        for entry in entries
                    ]
                    await self._run_io(self._storage.replace, log_codec.render(lines))
                    self._invalidate()

        if matched:
            self._metrics.records_tombstoned_total.inc(len(matched))
            self._log.info("records_tombstoned", count=len(matched))
        return len(matched)

    # =========================================================================
    # Internals
    # =========================================================================

    def _compile(self, query: Mapping[str, Any] | None) -> Predicate:
        return self._compiler.compile(self._parser.parse(query))

    async def _records(self) -> list[Record]:
        if self._cache_policy is CachePolicy.CACHE and self._cache_valid:
            return self._rows
        return await self._reload()

    async def _reload(self) -> list[Record]:
        generation = self._generation
        text = await self._run_io(self._storage.read_text)
        entries = log_codec.parse_entries(text)

        live = sum(1 for entry in entries if entry.is_live)
        rows = [row for _, row in log_codec.iter_live(entries, self._corrupt_policy)]
        corrupt = live - len(rows)

        # A local write that landed during the read leaves this snapshot stale.
        if generation == self._generation:
            self._rows = rows
            self._cache_valid = True
        self._metrics.records_loaded_total.inc(len(rows))
        if corrupt:
            self._metrics.corrupt_records_total.inc(corrupt)
        return rows

    def _invalidate(self) -> None:
        self._generation += 1
        self._cache_valid = False

    def _get_lock(self) -> asyncio.Lock:
        """The exclusive-section lock for the running event loop."""
        loop = asyncio.get_running_loop()
        if self._write_lock is None or self._lock_loop is not loop:
            self._write_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._write_lock

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        """Hold the exclusive write section; release is unconditional."""
        lock = self._get_lock()
        started = time.perf_counter()
        if not await acquire_within(lock, self._lock_timeout):
            self._metrics.lock_timeouts_total.inc()
            self._log.warning("write_lock_timeout", timeout_seconds=self._lock_timeout)
            raise WriteLockTimeoutError(self._lock_timeout)

        self._metrics.lock_wait_seconds.observe(time.perf_counter() - started)
        self._metrics.writers_busy.inc()
        try:
            yield
        finally:
            self._metrics.writers_busy.dec()
            lock.release()

    async def _run_io(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    @contextmanager
    def _observe(self, operation: str) -> Iterator[None]:
        """Trace an operation and record its latency and outcome."""
        started = time.perf_counter()
        status = "error"
        try:
            with trace_span(f"doc_store.{operation}", {"doc_store.path": str(self.path)}):
                yield
            status = "success"
        finally:
            self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - started
            )
            self._metrics.operations_total.labels(operation=operation, status=status).inc()

    def __repr__(self) -> str:
        return f"DocumentStore(path={str(self.path)!r}, state={self.state.value})"
