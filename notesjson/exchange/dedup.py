"""Duplicate detection keys."""

from ..store.base import Note
from .models import NoteKey, NoteRecord


def key_of(note: Note | NoteRecord) -> NoteKey | None:
    """Build the dedup key for a note.

    Returns:
        NoteKey of (title, timestamp), or None if either is missing.
        Keyless notes are never duplicates of anything.
    """
    if note.title is None or note.timestamp is None:
        return None
    return NoteKey(title=note.title, timestamp=note.timestamp)
