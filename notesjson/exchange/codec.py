"""Conversion between stored notes, portable records and JSON bytes.

Wire format: a UTF-8 JSON array of objects with exactly the keys
``title``, ``content`` and ``timestamp``. Timestamps are ISO-8601 strings
in UTC with six fractional digits, e.g. ``2025-11-17T09:30:00.123456+00:00``.
"""

import json
import logging
from typing import Any, Iterable

from ..errors import DecodeError, EncodeError
from ..store.base import Note
from .models import WIRE_KEYS, NoteRecord

logger = logging.getLogger(__name__)


def to_wire(notes: Iterable[Note]) -> list[NoteRecord]:
    """Map stored notes to portable records, preserving order.

    Notes missing any field are dropped.
    """
    records = []
    dropped = 0
    for note in notes:
        if not note.is_complete:
            dropped += 1
            continue
        records.append(
            NoteRecord(title=note.title, content=note.content, timestamp=note.timestamp)
        )

    if dropped:
        logger.debug(f"Dropped {dropped} incomplete notes from export")

    return records


def encode(records: Iterable[NoteRecord], indent: int | None = 2) -> bytes:
    """Serialize records to a JSON array.

    Raises:
        EncodeError: If serialization fails.
    """
    try:
        payload = [record.to_dict() for record in records]
        return json.dumps(payload, ensure_ascii=False, indent=indent).encode("utf-8")
    except (TypeError, ValueError, AttributeError) as e:
        raise EncodeError(f"Failed to encode notes: {e}") from e


def decode(data: bytes | str) -> list[NoteRecord]:
    """Parse a JSON array of note objects.

    All-or-nothing: any malformed element fails the whole batch.

    Raises:
        DecodeError: If the input is not a valid notes document.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Input is not valid UTF-8: {e}") from e

    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Input is not valid JSON: {e}") from e
    except RecursionError as e:
        raise DecodeError("Input is nested too deeply") from e

    if not isinstance(parsed, list):
        raise DecodeError(
            f"Expected a JSON array of notes, got {type(parsed).__name__}"
        )

    return [_decode_item(index, item) for index, item in enumerate(parsed)]


def _decode_item(index: int, item: Any) -> NoteRecord:
    """Validate and convert one array element."""
    if not isinstance(item, dict):
        raise DecodeError(f"Note {index}: expected an object, got {type(item).__name__}")

    missing = [key for key in WIRE_KEYS if key not in item]
    if missing:
        raise DecodeError(f"Note {index}: missing key(s) {', '.join(missing)}")

    extra = sorted(set(item) - set(WIRE_KEYS))
    if extra:
        raise DecodeError(f"Note {index}: unexpected key(s) {', '.join(extra)}")

    for key in WIRE_KEYS:
        if not isinstance(item[key], str):
            raise DecodeError(
                f"Note {index}: {key} must be a string, got {type(item[key]).__name__}"
            )
        try:
            item[key].encode("utf-8")
        except UnicodeEncodeError as e:
            raise DecodeError(f"Note {index}: {key} is not valid Unicode text") from e

    try:
        return NoteRecord.from_dict(item)
    except (ValueError, OverflowError) as e:
        raise DecodeError(
            f"Note {index}: invalid timestamp {item['timestamp']!r}: {e}"
        ) from e
