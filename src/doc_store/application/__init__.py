"""Application layer for the document store.

The application layer orchestrates domain logic to fulfill use cases:
loading the log, answering queries, and appending or tombstoning records.

Exports:
    - DocumentStore: Main entry point for the store
    - StoreState: Idle / busy state of the exclusive write section
    - CachePolicy: Reload-per-find or cache-until-write
"""

from doc_store.application.document_store import CachePolicy, DocumentStore, StoreState

__all__ = [
    "DocumentStore",
    "StoreState",
    "CachePolicy",
]
