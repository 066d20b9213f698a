"""Note persistence.

Provides the store interface used by export/import and two backends:
- SQLite (the embedded on-disk store)
- In-memory (tests and scratch use)
"""

from .base import Note, StorePort, format_timestamp, parse_timestamp
from .memory_store import InMemoryNoteStore
from .sqlite_store import SQLiteNoteStore

__all__ = [
    "Note",
    "StorePort",
    "format_timestamp",
    "parse_timestamp",
    "InMemoryNoteStore",
    "SQLiteNoteStore",
]
