"""Result shaping options for find()."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from doc_store.domain.errors import MalformedQueryError
from doc_store.domain.value_objects import SortDirection


@dataclass(frozen=True)
class FindOptions:
    """Sort and projection applied after filtering.

    Attributes:
        sort: (field, direction) pairs in the order the sort passes run.
            Each pass is a stable sort, so the last pair dominates.
        projection: Field names kept in each result, in output order.
            None keeps every field.
    """

    sort: tuple[tuple[str, SortDirection], ...] = field(default_factory=tuple)
    projection: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> FindOptions:
        """Build options from a ``{"sort": ..., "projection": ...}`` mapping.

        ``sort`` maps field names to signed numbers. ``projection`` is either
        a sequence of field names or a mapping whose keys are the fields.

        Raises:
            MalformedQueryError: If either option has the wrong shape.
        """
        if config is None:
            return cls()
        if not isinstance(config, Mapping):
            raise MalformedQueryError(f"find options must be a mapping, got {type(config).__name__}")

        unknown = set(config) - {"sort", "projection"}
        if unknown:
            raise MalformedQueryError(f"Unknown find options: {sorted(unknown)}")

        return cls(
            sort=_parse_sort(config.get("sort")),
            projection=_parse_projection(config.get("projection")),
        )


def _parse_sort(sort: Any) -> tuple[tuple[str, SortDirection], ...]:
    if sort is None:
        return ()
    if not isinstance(sort, Mapping):
        raise MalformedQueryError("sort must map field names to directions")

    passes = []
    for name, value in sort.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedQueryError(f"Sort direction for {name!r} must be a number, got {value!r}")
        passes.append((str(name), SortDirection.from_value(value)))
    return tuple(passes)


def _parse_projection(projection: Any) -> tuple[str, ...] | None:
    if projection is None:
        return None
    if isinstance(projection, str) or not isinstance(projection, Iterable):
        raise MalformedQueryError("projection must be a collection of field names")

    names: list[str] = []
    for name in projection:
        if not isinstance(name, str):
            raise MalformedQueryError(f"Projected field names must be strings, got {name!r}")
        if name not in names:
            names.append(name)
    return tuple(names)
