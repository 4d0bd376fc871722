"""Value objects for the document store.

Value objects are immutable and defined by their attributes rather than identity.

Exports:
    - LogPosition: Position of an entry in the log
    - Record: Type alias for a stored document
    - EntryStatus: Live / tombstoned / unknown line tag
    - SortDirection: Ascending / descending sort pass
"""

from doc_store.domain.value_objects.identifiers import (
    EntryStatus,
    LogPosition,
    Record,
    SortDirection,
)

__all__ = [
    "EntryStatus",
    "LogPosition",
    "Record",
    "SortDirection",
]
