"""Log identifiers and tags.

These value objects give names to the small set of primitives the log
format is built from.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NewType


LogPosition = NewType("LogPosition", int)
"""Zero-based index of an entry among the non-blank lines of the log."""

Record = Dict[str, Any]
"""A JSON-compatible document keyed by field name."""


class EntryStatus(Enum):
    """Status tag carried by the first character of every log line.

    Both tags are exactly one character wide, which lets a tombstone
    replace the live tag without shifting the payload.
    """

    LIVE = "E"
    TOMBSTONED = "D"
    UNKNOWN = "?"

    @classmethod
    def from_line(cls, line: str) -> EntryStatus:
        """Classify a log line by its leading character."""
        if line.startswith(cls.LIVE.value):
            return cls.LIVE
        if line.startswith(cls.TOMBSTONED.value):
            return cls.TOMBSTONED
        return cls.UNKNOWN


class SortDirection(Enum):
    """Direction of a single sort pass."""

    ASCENDING = 1
    DESCENDING = -1
    UNCHANGED = 0

    @classmethod
    def from_value(cls, value: int | float) -> SortDirection:
        """Map a signed sort value to a direction; only the sign matters."""
        if value > 0:
            return cls.ASCENDING
        if value < 0:
            return cls.DESCENDING
        return cls.UNCHANGED
