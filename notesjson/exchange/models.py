"""Portable note records and import bookkeeping."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..store.base import format_timestamp, parse_timestamp, to_utc

WIRE_KEYS = ("title", "content", "timestamp")


@dataclass(frozen=True)
class NoteRecord:
    """A note in its portable JSON form. All fields are required."""

    title: str
    content: str
    timestamp: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", to_utc(self.timestamp))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "content": self.content,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NoteRecord":
        """Create from an already validated dictionary."""
        return cls(
            title=data["title"],
            content=data["content"],
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class NoteKey:
    """Identity of a note for duplicate detection.

    Content is deliberately not part of the key.
    """

    title: str
    timestamp: datetime


class ImportMode(Enum):
    """How an import treats notes already in the store."""

    REPLACE = "replace"  # Delete everything, then insert the batch
    MERGE = "merge"  # Insert only notes whose key is not present

    @classmethod
    def parse(cls, value: "ImportMode | str") -> "ImportMode":
        """Accept an ImportMode or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown import mode {value!r} (expected one of: {valid})") from None


@dataclass
class ImportResult:
    """Outcome of an import."""

    mode: ImportMode
    total: int = 0
    inserted: int = 0
    skipped_duplicates: int = 0
    duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "total": self.total,
            "inserted": self.inserted,
            "skipped_duplicates": self.skipped_duplicates,
            "duration_ms": round(self.duration_ms, 2),
        }
