"""
Document Store - embedded, file-backed document database

Records live in a line-oriented append-only log, are logically deleted with
tombstone markers, and are queried through a small declarative predicate
language with projection and sort.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
