"""Query tree entities.

A query document such as::

    {"age": {"$gt": 2}, "$or": [{"name": {"$eq": "a"}}, {"$text": "admin"}]}

is parsed once into a tree of the node types below. The kind of each node
is fixed at parse time, so a record field that happens to be called
``$and`` can never be mistaken for the combinator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldOperator(Enum):
    """Comparison operators available in a field query."""

    EQ = "$eq"
    GT = "$gt"
    LT = "$lt"
    IN = "$in"

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(op.value for op in cls)


class OptionKey(Enum):
    """Query keys that are never field names."""

    TEXT = "$text"
    AND = "$and"
    OR = "$or"

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(opt.value for opt in cls)


@dataclass(frozen=True)
class Query(ABC):
    """Base class for query nodes."""

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class FieldConstraint(Query):
    """Comparison of one record field against an operand."""

    field_name: str
    operator: FieldOperator
    operand: Any

    def __str__(self) -> str:
        return f"{self.field_name} {self.operator.value} {self.operand!r}"


@dataclass(frozen=True)
class MatchAll(Query):
    """Matches every record.

    Produced for a field query without a recognized operator when the
    parser runs in permissive mode.
    """

    field_name: str | None = None

    def __str__(self) -> str:
        return "TRUE"


@dataclass(frozen=True)
class TextMatch(Query):
    """Case-insensitive token match over the store's full-text fields."""

    text: str

    def __str__(self) -> str:
        return f"$text {self.text!r}"


@dataclass(frozen=True)
class And(Query):
    """Conjunction of sub-queries. An empty conjunction is true."""

    clauses: tuple[Query, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if not self.clauses:
            return "TRUE"
        return "(" + " AND ".join(str(c) for c in self.clauses) + ")"


@dataclass(frozen=True)
class Or(Query):
    """Disjunction of sub-queries. An empty disjunction is false."""

    clauses: tuple[Query, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if not self.clauses:
            return "FALSE"
        return "(" + " OR ".join(str(c) for c in self.clauses) + ")"
