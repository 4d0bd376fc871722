"""File-based log storage.

This adapter implements the LogStorage protocol on a single UTF-8 text
file.

Write Paths:
    - append: open in append mode, write the encoded text in one call,
      optionally fsync. On failure the file is truncated back to its
      previous length.
    - replace: write a temporary file in the same directory, fsync it,
      then os.replace() it over the log. A crash mid-write leaves the old
      log intact.

Thread Safety:
    Single-writer assumed. The document store serializes all writes.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from doc_store.domain.errors import LogStorageError
from doc_store.infrastructure.logging import get_logger
from doc_store.ports.outbound.log_storage import SyncMode

logger = get_logger(__name__)

ENCODING = "utf-8"


class FileLogStorage:
    """File-based implementation of the LogStorage protocol.

    Attributes:
        path: Location of the log file.
        sync_mode: Whether writes are fsynced before returning.
    """

    def __init__(self, path: str | Path, sync_mode: SyncMode = SyncMode.FSYNC) -> None:
        """Initialize the storage.

        Args:
            path: Location of the log file. It is not created here.
            sync_mode: Durability of writes.
        """
        self._path = Path(path)
        self._sync_mode = sync_mode

    @property
    def path(self) -> Path:
        return self._path

    @property
    def sync_mode(self) -> SyncMode:
        return self._sync_mode

    def exists(self) -> bool:
        return self._path.is_file()

    def create(self) -> None:
        """Create the parent directory and an empty log if missing."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(exist_ok=True)
        except OSError as e:
            raise LogStorageError(f"Cannot create log file {self._path}: {e}") from e
        logger.debug("log_file_ready", path=str(self._path))

    def read_text(self) -> str:
        """Read the whole log.

        ``newline=""`` keeps ``\\r`` terminators as they are on disk.
        """
        try:
            with open(self._path, "r", encoding=ENCODING, newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise LogStorageError(f"Log file not found: {self._path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise LogStorageError(f"Cannot read log file {self._path}: {e}") from e

    def append(self, text: str) -> int:
        """Append text in a single write.

        Returns:
            Number of bytes written.
        """
        data = text.encode(ENCODING)
        try:
            f = open(self._path, "ab")
        except OSError as e:
            raise LogStorageError(f"Cannot open log file {self._path}: {e}") from e

        with f:
            original_size = f.seek(0, os.SEEK_END)
            try:
                f.write(data)
                self._sync(f)
            except OSError as e:
                self._truncate(original_size)
                raise LogStorageError(f"Append to {self._path} failed: {e}") from e

        return len(data)

    def replace(self, text: str) -> None:
        """Atomically replace the log with ``text``."""
        directory = self._path.parent
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise LogStorageError(f"Cannot create temporary file in {directory}: {e}") from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(text.encode(ENCODING))
                self._sync(f)
            os.replace(temp_path, self._path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise LogStorageError(f"Rewrite of {self._path} failed: {e}") from e

        logger.debug("log_file_replaced", path=str(self._path), size=len(text))

    def _sync(self, f) -> None:
        f.flush()
        if self._sync_mode == SyncMode.FSYNC:
            os.fsync(f.fileno())

    def _truncate(self, size: int) -> None:
        """Restore the log to ``size`` bytes after a failed append."""
        try:
            os.truncate(self._path, size)
        except OSError as e:
            logger.error("append_rollback_failed", path=str(self._path), error=str(e))
