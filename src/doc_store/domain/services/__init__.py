"""Domain services for the document store.

Services contain domain logic that doesn't naturally fit within entities.

Exports:
    - log_codec: Log text <-> entries <-> records
    - QueryParser: Query documents -> query trees
    - PredicateCompiler: Query trees -> predicates
    - result_pipeline: Filter, sort and project query results
    - stats: Generic sequence reducers
"""

from doc_store.domain.services import log_codec, result_pipeline, stats
from doc_store.domain.services.log_codec import CorruptRecordPolicy
from doc_store.domain.services.predicate_compiler import (
    Predicate,
    PredicateCompiler,
    compile_query,
)
from doc_store.domain.services.query_parser import QueryParser, parse_query

__all__ = [
    "log_codec",
    "result_pipeline",
    "stats",
    "CorruptRecordPolicy",
    "Predicate",
    "PredicateCompiler",
    "compile_query",
    "QueryParser",
    "parse_query",
]
