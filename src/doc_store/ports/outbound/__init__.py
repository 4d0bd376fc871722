"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
document store depends on, such as the log file.
"""

from doc_store.ports.outbound.log_storage import LogStorage, SyncMode

__all__ = [
    "LogStorage",
    "SyncMode",
]
