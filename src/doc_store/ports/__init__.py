"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (e.g., LogStorage)

Adapters implement these ports with concrete functionality.
"""

from doc_store.ports.outbound import LogStorage, SyncMode

__all__ = [
    "LogStorage",
    "SyncMode",
]
