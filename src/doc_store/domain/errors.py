"""Exception hierarchy for the document store.

Every error raised by the store derives from DocumentStoreError so callers
can catch the whole family with a single handler.
"""

from __future__ import annotations

from doc_store.domain.value_objects import LogPosition


class DocumentStoreError(Exception):
    """Base exception for all document store errors."""
    pass


class LogStorageError(DocumentStoreError):
    """The log file could not be read or written."""
    pass


class CorruptRecordError(DocumentStoreError):
    """A live log line could not be decoded into a record."""

    def __init__(self, position: LogPosition, reason: str) -> None:
        super().__init__(f"Corrupt record at log position {position}: {reason}")
        self.position = position
        self.reason = reason


class MalformedQueryError(DocumentStoreError):
    """A query document does not have a recognized shape."""
    pass


class InvalidRecordError(DocumentStoreError):
    """A record cannot be serialized into a single log line."""
    pass


class WriteLockTimeoutError(DocumentStoreError):
    """The exclusive write section was not acquired in time."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Exclusive write section not acquired within {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds
