"""Domain entities for the document store.

Exports:
    Log:
        - LogEntry: One tagged line of the log file

    Query tree:
        - Query: Base class for query nodes
        - FieldConstraint: Single-field comparison ($eq, $gt, $lt, $in)
        - TextMatch: Full-text token match ($text)
        - And, Or: Boolean combinators
        - MatchAll: Always-true node (permissive parsing)
        - FieldOperator, OptionKey: Recognized query keys

    Result shaping:
        - FindOptions: Sort and projection settings
"""

from doc_store.domain.entities.find_options import FindOptions
from doc_store.domain.entities.log_entry import LogEntry
from doc_store.domain.entities.query import (
    And,
    FieldConstraint,
    FieldOperator,
    MatchAll,
    OptionKey,
    Or,
    Query,
    TextMatch,
)

__all__ = [
    # Log
    "LogEntry",
    # Query tree
    "Query",
    "FieldConstraint",
    "TextMatch",
    "And",
    "Or",
    "MatchAll",
    "FieldOperator",
    "OptionKey",
    # Result shaping
    "FindOptions",
]
