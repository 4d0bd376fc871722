"""Log entry entity.

A log entry is one non-blank line of the log file: a one-character status
tag followed by the serialized record payload.

Line Format:
    E{"name":"a","age":3}     live record
    D{"name":"b","age":5}     tombstoned record

Any other leading character marks the line as unknown. Unknown lines are
never queried but are written back verbatim whenever the log is rewritten.
"""

from __future__ import annotations

from dataclasses import dataclass

from doc_store.domain.value_objects import EntryStatus, LogPosition


@dataclass(frozen=True)
class LogEntry:
    """One line of the log.

    Attributes:
        position: Index of the line among the non-blank lines of the log.
        status: Tag parsed from the first character.
        line: The full raw line, tag included, without its terminator.
    """

    position: LogPosition
    status: EntryStatus
    line: str

    @classmethod
    def from_line(cls, position: int, line: str) -> LogEntry:
        """Build an entry from a raw line."""
        return cls(
            position=LogPosition(position),
            status=EntryStatus.from_line(line),
            line=line,
        )

    @property
    def payload(self) -> str:
        """The serialized record, without the status tag."""
        return self.line[1:]

    @property
    def is_live(self) -> bool:
        return self.status is EntryStatus.LIVE

    def tombstoned(self) -> LogEntry:
        """Return this entry with its live tag replaced by the deleted tag.

        The payload is left untouched. Entries that are not live are
        returned unchanged, which keeps repeated deletes stable.
        """
        if not self.is_live:
            return self
        return LogEntry(
            position=self.position,
            status=EntryStatus.TOMBSTONED,
            line=EntryStatus.TOMBSTONED.value + self.payload,
        )
