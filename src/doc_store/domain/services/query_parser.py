"""Query document parser.

Turns a query document (nested mappings and lists, as a caller would write
them in JSON) into a tree of query nodes. Every key of a document is either
one of the option keys ``$text``, ``$and``, ``$or`` or a field name; field
names map to a single-operator field query::

    {"age": {"$gt": 2}}
    {"name": {"$in": ["a", "b"]}}

Strict mode (the default) rejects a field query that does not carry exactly
one recognized operator. Permissive mode keeps the historical behavior: a
field query without a recognized operator matches every record, and when
several operators are present the last of $eq, $gt, $lt, $in wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from doc_store.domain.entities import (
    And,
    FieldConstraint,
    FieldOperator,
    MatchAll,
    OptionKey,
    Or,
    Query,
    TextMatch,
)
from doc_store.domain.errors import MalformedQueryError


class QueryParser:
    """Parser for query documents.

    Example:
        >>> parser = QueryParser()
        >>> print(parser.parse({"age": {"$gt": 2}, "$text": "admin"}))
        ($text 'admin' AND age $gt 2)
    """

    def __init__(self, strict: bool = True) -> None:
        """Initialize the parser.

        Args:
            strict: Reject field queries without exactly one operator.
        """
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def parse(self, document: Mapping[str, Any] | None) -> Query:
        """Parse a query document.

        ``None`` and ``{}`` both parse to an empty conjunction, which
        matches every record.

        Raises:
            MalformedQueryError: If the document has an invalid shape.
        """
        if document is None:
            return And()
        if not isinstance(document, Mapping):
            raise MalformedQueryError(
                f"Query must be a mapping, got {type(document).__name__}"
            )

        clauses: list[Query] = []

        if OptionKey.AND.value in document:
            clauses.append(And(self._parse_subqueries(document[OptionKey.AND.value], OptionKey.AND)))

        if OptionKey.OR.value in document:
            clauses.append(Or(self._parse_subqueries(document[OptionKey.OR.value], OptionKey.OR)))

        if OptionKey.TEXT.value in document:
            text = document[OptionKey.TEXT.value]
            if not isinstance(text, str):
                raise MalformedQueryError(f"$text expects a string, got {text!r}")
            clauses.append(TextMatch(text))

        for key, value in document.items():
            if key in OptionKey.keys():
                continue
            if not isinstance(key, str):
                raise MalformedQueryError(f"Field names must be strings, got {key!r}")
            clauses.append(self._parse_field(key, value))

        return And(tuple(clauses))

    def _parse_subqueries(self, value: Any, option: OptionKey) -> tuple[Query, ...]:
        """Parse the operand of $and / $or."""
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, (list, tuple)):
            raise MalformedQueryError(f"{option.value} expects a list of queries, got {value!r}")

        subqueries = []
        for item in value:
            if not isinstance(item, Mapping):
                raise MalformedQueryError(
                    f"{option.value} entries must be query mappings, got {item!r}"
                )
            subqueries.append(self.parse(item))
        return tuple(subqueries)

    def _parse_field(self, name: str, value: Any) -> Query:
        """Parse a single ``field: {operator: operand}`` pair."""
        if not isinstance(value, Mapping):
            if self._strict:
                raise MalformedQueryError(
                    f"Field query for {name!r} must be an operator mapping, got {value!r}"
                )
            return MatchAll(name)

        operators = [op for op in FieldOperator if op.value in value]

        if self._strict:
            unknown = [key for key in value if key not in FieldOperator.keys()]
            if unknown:
                raise MalformedQueryError(f"Unknown operators for {name!r}: {unknown!r}")
            if len(operators) != 1:
                raise MalformedQueryError(
                    f"Field query for {name!r} needs exactly one of "
                    f"{', '.join(FieldOperator.keys())}"
                )
        elif not operators:
            return MatchAll(name)

        operator = operators[-1]
        operand = value[operator.value]

        if operator is FieldOperator.IN:
            if isinstance(operand, (str, bytes, Mapping)) or not isinstance(operand, (list, tuple, set, frozenset)):
                raise MalformedQueryError(f"$in for {name!r} expects a list, got {operand!r}")
            operand = tuple(operand)

        return FieldConstraint(name, operator, operand)


def parse_query(document: Mapping[str, Any] | None, strict: bool = True) -> Query:
    """Parse a query document with a throwaway parser."""
    return QueryParser(strict=strict).parse(document)
