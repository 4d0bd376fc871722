"""Result pipeline: filter -> sort -> project.

The three stages always run in this order. Filtering keeps the original
order of the records. Sorting runs one stable pass per sort key, in the
order the keys were given, so the last key decides the final order and
earlier keys only break its ties. Projection builds new records holding the
listed fields in the listed order, leaving out fields a record lacks.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import Any

from doc_store.domain.entities import FindOptions
from doc_store.domain.services.predicate_compiler import Predicate
from doc_store.domain.value_objects import Record, SortDirection

_MISSING = object()


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison; missing or unorderable values compare equal."""
    if left is _MISSING or right is _MISSING:
        return 0
    try:
        if left < right:
            return -1
        if left > right:
            return 1
    except TypeError:
        return 0
    return 0


def filter_records(records: Iterable[Record], predicate: Predicate) -> list[Record]:
    """Keep the records that satisfy the predicate, preserving order."""
    return [record for record in records if predicate(record)]


def sort_records(
    records: Sequence[Record],
    sort: Sequence[tuple[str, SortDirection]],
) -> list[Record]:
    """Apply one stable sort pass per (field, direction) pair."""
    result = list(records)
    for name, direction in sort:
        if direction is SortDirection.UNCHANGED:
            continue
        sign = direction.value

        def compare(a: Record, b: Record, name: str = name, sign: int = sign) -> int:
            return sign * compare_values(a.get(name, _MISSING), b.get(name, _MISSING))

        result.sort(key=cmp_to_key(compare))
    return result


def project_records(records: Iterable[Record], fields: Sequence[str]) -> list[Record]:
    """Reduce each record to the listed fields, in listed order."""
    return [{name: record[name] for name in fields if name in record} for record in records]


def run(
    records: Iterable[Record],
    predicate: Predicate,
    options: FindOptions | None = None,
) -> list[Record]:
    """Run the full pipeline.

    The returned records are deep copies, so callers can mutate them
    without touching the store's in-memory state.
    """
    options = options or FindOptions()

    result = filter_records(records, predicate)
    if options.sort:
        result = sort_records(result, options.sort)
    if options.projection is not None:
        result = project_records(result, options.projection)
    return copy.deepcopy(result)
