"""Predicate compiler.

Compiles a query tree into a plain ``Record -> bool`` function. Each node
is compiled exactly once; evaluating the predicate against a record only
calls the closures built here.

Comparison Semantics:
    - $eq: equality; a boolean never equals a number
    - $gt / $lt: Python ordering of the field's value
    - $in: $eq against any element of the operand
    - A missing field, or values that cannot be ordered against each
      other, make the comparison false
    - $text: true iff any full-text field, stringified and split on
      whitespace, has a token equal to the text ignoring case
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from doc_store.domain.entities import (
    And,
    FieldConstraint,
    FieldOperator,
    MatchAll,
    Or,
    Query,
    TextMatch,
)
from doc_store.domain.services.query_parser import QueryParser
from doc_store.domain.value_objects import Record

Predicate = Callable[[Record], bool]

_MISSING = object()


def values_equal(left: Any, right: Any) -> bool:
    """Equality that keeps booleans apart from numbers (True != 1)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


def _greater(left: Any, right: Any) -> bool:
    try:
        return bool(left > right)
    except TypeError:
        return False


def _less(left: Any, right: Any) -> bool:
    try:
        return bool(left < right)
    except TypeError:
        return False


def stringify(value: Any) -> str:
    """Render a field value the way $text tokenizes it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class PredicateCompiler:
    """Compiles query trees into predicates.

    Attributes:
        full_text_fields: Fields searched by $text.
    """

    def __init__(self, full_text_fields: Iterable[str] = ()) -> None:
        self._full_text_fields: tuple[str, ...] = tuple(full_text_fields)

    @property
    def full_text_fields(self) -> tuple[str, ...]:
        return self._full_text_fields

    def compile(self, query: Query) -> Predicate:
        """Compile a query tree into a predicate."""
        if isinstance(query, And):
            return self._compile_and(query.clauses)
        if isinstance(query, Or):
            return self._compile_or(query.clauses)
        if isinstance(query, TextMatch):
            return self._compile_text(query.text)
        if isinstance(query, FieldConstraint):
            return self._compile_field(query)
        if isinstance(query, MatchAll):
            return lambda record: True
        raise TypeError(f"Unsupported query node: {type(query).__name__}")

    def _compile_and(self, clauses: Sequence[Query]) -> Predicate:
        predicates = [self.compile(clause) for clause in clauses]
        if len(predicates) == 1:
            return predicates[0]
        return lambda record: all(p(record) for p in predicates)

    def _compile_or(self, clauses: Sequence[Query]) -> Predicate:
        predicates = [self.compile(clause) for clause in clauses]
        return lambda record: any(p(record) for p in predicates)

    def _compile_text(self, text: str) -> Predicate:
        needle = text.lower()
        fields = self._full_text_fields

        def match(record: Record) -> bool:
            for name in fields:
                value = record.get(name, _MISSING)
                if value is _MISSING:
                    continue
                if any(token.lower() == needle for token in stringify(value).split()):
                    return True
            return False

        return match

    def _compile_field(self, constraint: FieldConstraint) -> Predicate:
        name = constraint.field_name
        operand = constraint.operand

        if constraint.operator is FieldOperator.EQ:
            test: Callable[[Any], bool] = lambda value: values_equal(value, operand)
        elif constraint.operator is FieldOperator.GT:
            test = lambda value: _greater(value, operand)
        elif constraint.operator is FieldOperator.LT:
            test = lambda value: _less(value, operand)
        else:
            test = lambda value: any(values_equal(value, candidate) for candidate in operand)

        def match(record: Record) -> bool:
            value = record.get(name, _MISSING)
            return value is not _MISSING and test(value)

        return match


def compile_query(
    document: Mapping[str, Any] | None,
    full_text_fields: Iterable[str] = (),
    strict: bool = True,
) -> Predicate:
    """Parse and compile a query document in one step.

    Raises:
        MalformedQueryError: If the document has an invalid shape.
    """
    query = QueryParser(strict=strict).parse(document)
    return PredicateCompiler(full_text_fields).compile(query)
