"""Unit tests for FileLogStorage."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from doc_store.adapters.outbound import FileLogStorage
from doc_store.domain.errors import LogStorageError
from doc_store.ports.outbound import SyncMode


@pytest.mark.unit
class TestFileLogStorage:
    """Tests for FileLogStorage."""

    @pytest.fixture
    def storage(self, temp_dir: Path) -> FileLogStorage:
        """Create a storage over a not-yet-existing log."""
        return FileLogStorage(temp_dir / "logs" / "records.log", sync_mode=SyncMode.NONE)

    def test_creation_is_lazy(self, storage: FileLogStorage) -> None:
        assert not storage.exists()
        assert storage.sync_mode == SyncMode.NONE

    def test_create(self, storage: FileLogStorage) -> None:
        storage.create()

        assert storage.exists()
        assert storage.read_text() == ""

    def test_create_keeps_existing_content(self, storage: FileLogStorage) -> None:
        storage.create()
        storage.append("E{}\n")

        storage.create()

        assert storage.read_text() == "E{}\n"

    def test_read_missing_raises(self, storage: FileLogStorage) -> None:
        with pytest.raises(LogStorageError, match="not found"):
            storage.read_text()

    def test_append(self, storage: FileLogStorage) -> None:
        storage.create()

        written = storage.append('E{"name":"Zoë"}\n')

        assert written == len('E{"name":"Zoë"}\n'.encode("utf-8"))
        assert storage.read_text() == 'E{"name":"Zoë"}\n'

    def test_append_accumulates(self, storage: FileLogStorage) -> None:
        storage.create()
        storage.append("Ea\n")
        storage.append("Eb\n")

        assert storage.read_text() == "Ea\nEb\n"

    def test_read_preserves_carriage_returns(self, storage: FileLogStorage) -> None:
        storage.create()
        storage.path.write_bytes(b"Ea\rDb\r\n")

        assert storage.read_text() == "Ea\rDb\r\n"

    def test_replace(self, storage: FileLogStorage) -> None:
        storage.create()
        storage.append("Ea\nEb\n")

        storage.replace("Ea\nDb\n")

        assert storage.read_text() == "Ea\nDb\n"

    def test_replace_leaves_no_temporary_files(self, storage: FileLogStorage) -> None:
        storage.create()

        storage.replace("Ea\n")

        assert os.listdir(storage.path.parent) == [storage.path.name]

    def test_failed_replace_keeps_old_log(
        self, storage: FileLogStorage, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        storage.create()
        storage.append("Ea\n")

        def broken_replace(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)

        with pytest.raises(LogStorageError, match="disk full"):
            storage.replace("Da\n")

        assert storage.read_text() == "Ea\n"
        assert os.listdir(storage.path.parent) == [storage.path.name]

    def test_fsync_mode(self, temp_dir: Path) -> None:
        storage = FileLogStorage(temp_dir / "synced.log", sync_mode=SyncMode.FSYNC)
        storage.create()

        storage.append("Ea\n")
        storage.replace("Da\n")

        assert storage.read_text() == "Da\n"
