"""Base classes for note persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone


def to_utc(value: datetime | None) -> datetime | None:
    """Normalize a timestamp to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Note:
    """A persisted note.

    Every field may be missing on a stored row; incomplete notes are kept
    in the store but never exported.
    """

    title: str | None
    content: str | None
    timestamp: datetime | None
    id: int | None = None  # Assigned by the store

    def __post_init__(self) -> None:
        self.timestamp = to_utc(self.timestamp)

    @property
    def is_complete(self) -> bool:
        """Whether all exportable fields are present."""
        return (
            self.title is not None
            and self.content is not None
            and self.timestamp is not None
        )


class StorePort(ABC):
    """The operations the export/import engine needs from a note store.

    Inserts and deletes are staged until ``commit()``. Callers own the
    store's lifecycle and pass it explicitly to every engine operation.
    """

    @abstractmethod
    def fetch_all_sorted(self) -> list[Note]:
        """Return every persisted note, newest timestamp first."""
        pass

    @abstractmethod
    def insert(self, title: str, content: str, timestamp: datetime) -> None:
        """Stage one new note."""
        pass

    @abstractmethod
    def delete_all(self) -> int:
        """Stage removal of every note.

        Returns:
            Number of notes removed.
        """
        pass

    @abstractmethod
    def commit(self) -> None:
        """Persist staged changes.

        Raises:
            StoreError: On underlying I/O or constraint failure.
        """
        pass

    def rollback(self) -> None:
        """Discard staged changes, if the store supports it."""
        pass

    def count(self) -> int:
        """Number of persisted notes."""
        return len(self.fetch_all_sorted())


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with microsecond precision.

    The offset is always ``+00:00`` so rendered values sort in time order.
    """
    return to_utc(value).isoformat(timespec="microseconds")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    return to_utc(datetime.fromisoformat(text))
