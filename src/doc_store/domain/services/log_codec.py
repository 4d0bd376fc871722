"""Log codec: text <-> entries <-> records.

Log Format:
    - UTF-8 text, one entry per line
    - Any of ``\\n`` / ``\\r`` terminates a line; blank lines are ignored
    - First character is the status tag: ``E`` live, ``D`` deleted
    - The rest of the line is a JSON object

There is no header, length prefix or checksum. A live line whose payload is
not a JSON object is corrupt; what happens to it is decided by the caller's
corrupt-record policy.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from doc_store.domain.entities import LogEntry
from doc_store.domain.errors import CorruptRecordError, InvalidRecordError
from doc_store.domain.value_objects import EntryStatus, Record
from doc_store.infrastructure.logging import get_logger

logger = get_logger(__name__)

LINE_SPLIT_PATTERN = re.compile(r"[\n\r]")
LINE_TERMINATOR = "\n"


class CorruptRecordPolicy(Enum):
    """How undecodable live lines are handled while loading."""

    RAISE = "raise"
    SKIP = "skip"


def split_lines(text: str) -> list[str]:
    """Split log text into its non-blank lines, in file order."""
    return [line for line in LINE_SPLIT_PATTERN.split(text) if line.strip()]


def parse_entries(text: str) -> list[LogEntry]:
    """Classify every non-blank line of the log by its status tag."""
    return [LogEntry.from_line(position, line) for position, line in enumerate(split_lines(text))]


def decode_record(entry: LogEntry) -> Record:
    """Deserialize the payload of a live entry.

    Raises:
        CorruptRecordError: If the payload is not a JSON object.
    """
    try:
        value = json.loads(entry.payload)
    except ValueError as e:
        raise CorruptRecordError(entry.position, f"invalid JSON: {e}") from e

    if not isinstance(value, dict):
        raise CorruptRecordError(
            entry.position, f"expected a JSON object, got {type(value).__name__}"
        )
    return value


def iter_live(
    entries: Iterable[LogEntry],
    policy: CorruptRecordPolicy = CorruptRecordPolicy.RAISE,
) -> Iterable[tuple[LogEntry, Record]]:
    """Yield (entry, record) for every decodable live entry.

    Tombstoned and unknown entries are never decoded. Under the SKIP
    policy a corrupt live line is logged and passed over.
    """
    for entry in entries:
        if not entry.is_live:
            continue
        try:
            record = decode_record(entry)
        except CorruptRecordError as e:
            if policy is CorruptRecordPolicy.RAISE:
                raise
            logger.warning("corrupt_record_skipped", position=e.position, reason=e.reason)
            continue
        yield entry, record


def load_records(
    text: str,
    policy: CorruptRecordPolicy = CorruptRecordPolicy.RAISE,
) -> list[Record]:
    """Decode all live records of a log, in append order."""
    return [record for _, record in iter_live(parse_entries(text), policy)]


def encode_record(record: Mapping[str, Any]) -> str:
    """Serialize a record as a live log line (without terminator).

    Raises:
        InvalidRecordError: If the record is not a mapping with string keys,
            is not JSON-serializable, or would span more than one line.
    """
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"Records must be mappings, got {type(record).__name__}")

    bad_keys = [key for key in record if not isinstance(key, str)]
    if bad_keys:
        raise InvalidRecordError(f"Record field names must be strings: {bad_keys!r}")

    try:
        payload = json.dumps(dict(record), ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise InvalidRecordError(f"Record is not JSON-serializable: {e}") from e

    line = EntryStatus.LIVE.value + payload
    if LINE_SPLIT_PATTERN.search(line):
        raise InvalidRecordError("Serialized record contains a line terminator")
    return line


def render(lines: Iterable[str]) -> str:
    """Join lines into log text, one per line, terminator-ended."""
    return "".join(line + LINE_TERMINATOR for line in lines)


def append_text(existing: str, line: str) -> str:
    """Text to append after ``existing`` so that ``line`` starts a new line."""
    if existing and not existing.endswith(("\n", "\r")):
        return LINE_TERMINATOR + line + LINE_TERMINATOR
    return line + LINE_TERMINATOR
