"""Generic reducers over sequences.

These helpers work on any sequence together with a three-way comparator
``cmp(a, b)`` returning a negative number, zero or a positive number. They
share nothing with the document store.

Policies:
    - Ties resolve to the first occurrence
    - Median is the lower median: the element at sorted position
      ``(n - 1) // 2`` of a stable sort
    - Index functions return -1 and element functions None for empty input
"""

from __future__ import annotations

import statistics
from collections.abc import Callable, Sequence
from functools import cmp_to_key
from typing import Optional, TypeVar

T = TypeVar("T")

Comparator = Callable[[T, T], float]


def _extremum_index(items: Sequence[T], comparator: Comparator[T], sign: int) -> int:
    best = -1
    for index, item in enumerate(items):
        if best < 0 or sign * comparator(item, items[best]) > 0:
            best = index
    return best


def get_max_index(items: Sequence[T], comparator: Comparator[T]) -> int:
    """Index of the greatest element, or -1 when empty."""
    return _extremum_index(items, comparator, 1)


def get_max_element(items: Sequence[T], comparator: Comparator[T]) -> Optional[T]:
    """The greatest element, or None when empty."""
    index = get_max_index(items, comparator)
    return items[index] if index >= 0 else None


def get_min_index(items: Sequence[T], comparator: Comparator[T]) -> int:
    """Index of the smallest element, or -1 when empty."""
    return _extremum_index(items, comparator, -1)


def get_min_element(items: Sequence[T], comparator: Comparator[T]) -> Optional[T]:
    """The smallest element, or None when empty."""
    index = get_min_index(items, comparator)
    return items[index] if index >= 0 else None


def get_median_index(items: Sequence[T], comparator: Comparator[T]) -> int:
    """Index (in the input) of the lower median, or -1 when empty."""
    if not items:
        return -1
    order = sorted(range(len(items)), key=cmp_to_key(lambda a, b: comparator(items[a], items[b])))
    return order[(len(items) - 1) // 2]


def get_median_element(items: Sequence[T], comparator: Comparator[T]) -> Optional[T]:
    """The lower median element, or None when empty."""
    index = get_median_index(items, comparator)
    return items[index] if index >= 0 else None


def get_average_value(items: Sequence[T], get_value: Callable[[T], float]) -> float:
    """Arithmetic mean of ``get_value`` over the items.

    Raises:
        statistics.StatisticsError: If ``items`` is empty.
    """
    return statistics.fmean(get_value(item) for item in items)
