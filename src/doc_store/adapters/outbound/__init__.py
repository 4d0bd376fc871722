"""Outbound adapters - implementations of outbound ports.

- FileLogStorage: Implements LogStorage on a local text file
"""

from doc_store.adapters.outbound.file_log_storage import FileLogStorage

__all__ = [
    "FileLogStorage",
]
