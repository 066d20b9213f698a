"""In-memory note store."""

from datetime import datetime

from .base import Note, StorePort


class InMemoryNoteStore(StorePort):
    """Map-backed note store with staged changes.

    Inserts and deletes are applied to a working copy and only become
    visible to ``fetch_all_sorted()`` after ``commit()``.
    """

    def __init__(self, notes: list[Note] | None = None):
        self._next_id = 1
        self._committed: dict[int, Note] = {}
        for note in notes or []:
            self._committed[self._take_id()] = note
        self._staged: dict[int, Note] | None = None

    def _take_id(self) -> int:
        note_id = self._next_id
        self._next_id += 1
        return note_id

    def _working(self) -> dict[int, Note]:
        if self._staged is None:
            self._staged = dict(self._committed)
        return self._staged

    def fetch_all_sorted(self) -> list[Note]:
        notes = [
            Note(title=n.title, content=n.content, timestamp=n.timestamp, id=note_id)
            for note_id, n in self._committed.items()
        ]
        # Newest first, ties by latest insert; undated notes go last
        notes.sort(key=lambda n: n.id, reverse=True)
        dated = [n for n in notes if n.timestamp is not None]
        undated = [n for n in notes if n.timestamp is None]
        dated.sort(key=lambda n: n.timestamp, reverse=True)
        return dated + undated

    def insert(self, title: str, content: str, timestamp: datetime) -> None:
        self._working()[self._take_id()] = Note(
            title=title, content=content, timestamp=timestamp
        )

    def delete_all(self) -> int:
        working = self._working()
        removed = len(working)
        working.clear()
        return removed

    def commit(self) -> None:
        if self._staged is not None:
            self._committed = self._staged
            self._staged = None

    def rollback(self) -> None:
        self._staged = None

    def count(self) -> int:
        return len(self._committed)
