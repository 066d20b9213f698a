"""SQLite-backed note store."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import StoreError
from .base import Note, StorePort, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

# Note columns are nullable: a stored row may be missing any field
SCHEMA = """
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    content TEXT,
    timestamp TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_notes_timestamp ON notes(timestamp);
CREATE INDEX IF NOT EXISTS idx_notes_title ON notes(title, timestamp);
"""


class SQLiteNoteStore(StorePort):
    """Embedded SQLite storage for notes.

    Writes stay in an open transaction until ``commit()``.
    """

    def __init__(self, db_path: str | Path):
        """Initialize the note store.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path).expanduser()
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Initialize database connection and schema."""
        if self._conn is not None:
            return

        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open note store {self.db_path}: {e}") from e

        logger.info(f"SQLiteNoteStore connected to {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            logger.info("SQLiteNoteStore connection closed")

    def __enter__(self) -> "SQLiteNoteStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure we have a database connection."""
        if self._conn is None:
            self.connect()
        return self._conn

    # ==================== Store Port ====================

    def fetch_all_sorted(self) -> list[Note]:
        """Return every note, newest timestamp first."""
        conn = self._ensure_connected()

        try:
            cursor = conn.execute(
                """
                SELECT id, title, content, timestamp
                FROM notes
                ORDER BY timestamp DESC, id DESC
                """
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to fetch notes: {e}") from e

        return [self._row_to_note(row) for row in rows]

    def insert(self, title: str, content: str, timestamp: datetime) -> None:
        """Stage a new note row."""
        conn = self._ensure_connected()

        try:
            conn.execute(
                "INSERT INTO notes (title, content, timestamp) VALUES (?, ?, ?)",
                (title, content, format_timestamp(timestamp)),
            )
        except (sqlite3.Error, UnicodeError) as e:
            raise StoreError(f"Failed to insert note {title!r}: {e}") from e

    def delete_all(self) -> int:
        """Stage removal of every note."""
        conn = self._ensure_connected()

        try:
            cursor = conn.execute("DELETE FROM notes")
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete notes: {e}") from e

        return cursor.rowcount

    def commit(self) -> None:
        """Commit the open transaction."""
        conn = self._ensure_connected()

        try:
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to commit note changes: {e}") from e

    def rollback(self) -> None:
        """Roll back the open transaction."""
        if self._conn is None:
            return

        try:
            self._conn.rollback()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to roll back note changes: {e}") from e

    def count(self) -> int:
        conn = self._ensure_connected()

        try:
            return conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count notes: {e}") from e

    # ==================== Convenience ====================

    def add_note(
        self,
        title: str,
        content: str,
        timestamp: datetime | None = None,
    ) -> Note:
        """Insert and commit a single note.

        Args:
            title: Note title.
            content: Note body.
            timestamp: When the note was written. Defaults to now.

        Returns:
            The stored Note.
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        self.insert(title, content, timestamp)
        self.commit()

        note_id = self._conn.execute("SELECT last_insert_rowid()").fetchone()[0]
        logger.debug(f"Added note {note_id}: {title!r}")
        return Note(title=title, content=content, timestamp=timestamp, id=note_id)

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with note counts and database size.
        """
        conn = self._ensure_connected()

        stats: dict[str, Any] = {"db_path": str(self.db_path)}

        try:
            stats["note_count"] = conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]
            stats["incomplete_count"] = conn.execute(
                """
                SELECT COUNT(*) FROM notes
                WHERE title IS NULL OR content IS NULL OR timestamp IS NULL
                """
            ).fetchone()[0]

            row = conn.execute(
                "SELECT MIN(timestamp), MAX(timestamp) FROM notes"
            ).fetchone()
            stats["oldest"] = row[0]
            stats["newest"] = row[1]
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read note stats: {e}") from e

        if isinstance(self.db_path, Path) and self.db_path.exists():
            stats["db_size_mb"] = round(self.db_path.stat().st_size / (1024 * 1024), 2)

        return stats

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        """Convert a notes row to a Note."""
        timestamp = None
        if row["timestamp"] is not None:
            timestamp = parse_timestamp(row["timestamp"])

        return Note(
            title=row["title"],
            content=row["content"],
            timestamp=timestamp,
            id=row["id"],
        )
