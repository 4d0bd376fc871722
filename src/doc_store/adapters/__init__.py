"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (the log file)
"""

from doc_store.adapters.outbound import FileLogStorage

__all__ = [
    "FileLogStorage",
]
