"""Log storage port.

This outbound port defines the contract for persisting the raw text of the
document log. The store works on whole-file text: it reads everything,
appends single lines, and replaces the whole file when tombstoning.

Durability:
    - append() either adds the full text or leaves the file as it was
    - replace() is atomic: readers see the old or the new file, never a
      truncated one
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Protocol


class SyncMode(Enum):
    """Durability of writes.

    FSYNC: Flush file data to disk before returning (safest)
    NONE: Rely on OS buffering (fastest, used by tests)
    """

    FSYNC = "fsync"
    NONE = "none"


class LogStorage(Protocol):
    """Protocol for log file persistence.

    Thread Safety:
        Single writer assumed. The document store serializes all writes.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the location of the log file."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Return True if the log file exists."""
        ...

    @abstractmethod
    def create(self) -> None:
        """Create an empty log file if none exists."""
        ...

    @abstractmethod
    def read_text(self) -> str:
        """Read the full log as text.

        Raises:
            LogStorageError: If the file is missing or unreadable.
        """
        ...

    @abstractmethod
    def append(self, text: str) -> int:
        """Append text to the end of the log.

        Returns:
            Number of bytes written.

        Raises:
            LogStorageError: If the write fails. The file keeps its
                previous length.
        """
        ...

    @abstractmethod
    def replace(self, text: str) -> None:
        """Atomically replace the whole log with the given text.

        Raises:
            LogStorageError: If the rewrite fails. The old file is kept.
        """
        ...
