"""Export/import reconciliation between a note store and portable records.

Every operation takes the store explicitly and holds a per-store lock for
its duration, so two imports against the same store instance never
overlap. Nothing is retried: store failures surface immediately.
"""

import logging
import threading
import time
import weakref
from contextlib import contextmanager
from typing import Iterable, Iterator

from ..store.base import StorePort
from .codec import encode, to_wire
from .dedup import key_of
from .models import ImportMode, ImportResult, NoteKey, NoteRecord

logger = logging.getLogger(__name__)

_locks: "weakref.WeakKeyDictionary[StorePort, threading.RLock]" = weakref.WeakKeyDictionary()
_locks_guard = threading.Lock()


@contextmanager
def store_lock(store: StorePort) -> Iterator[None]:
    """Hold the in-process lock for a store instance."""
    with _locks_guard:
        lock = _locks.get(store)
        if lock is None:
            lock = threading.RLock()
            _locks[store] = lock

    with lock:
        yield


def _rollback(store: StorePort) -> None:
    """Discard staged changes after a failed operation."""
    try:
        store.rollback()
    except Exception as e:
        logger.warning(f"Rollback after failed operation also failed: {e}")


def import_batch(
    incoming: Iterable[NoteRecord],
    mode: ImportMode | str,
    store: StorePort,
) -> ImportResult:
    """Import portable records into a store.

    Replace mode deletes every stored note and inserts the whole batch.
    Merge mode inserts only records whose (title, timestamp) key is not
    already stored; keyless records are always inserted. A record whose key
    matches one inserted earlier in the same batch is also skipped, so a
    merge never adds two notes with the same key. Changes are committed
    once at the end.

    Args:
        incoming: Records to import, in insertion order.
        mode: ImportMode or its string value.
        store: Target store.

    Returns:
        ImportResult with counts.

    Raises:
        StoreError: If the store fails; staged changes are rolled back.
    """
    mode = ImportMode.parse(mode)
    records = list(incoming)
    result = ImportResult(mode=mode, total=len(records))
    started = time.monotonic()

    with store_lock(store):
        try:
            seen: set[NoteKey] = set()

            if mode is ImportMode.REPLACE:
                removed = store.delete_all()
                logger.debug(f"Replace import cleared {removed} existing notes")
            else:
                # Snapshot existing keys once, before any insert
                for note in store.fetch_all_sorted():
                    key = key_of(note)
                    if key is not None:
                        seen.add(key)

            for record in records:
                key = key_of(record)

                if mode is ImportMode.MERGE and key is not None and key in seen:
                    result.skipped_duplicates += 1
                    logger.debug(f"Skipping duplicate note {record.title!r}")
                    continue

                store.insert(record.title, record.content, record.timestamp)
                result.inserted += 1
                if key is not None:
                    seen.add(key)

            store.commit()
        except Exception:
            _rollback(store)
            raise

    result.duration_ms = (time.monotonic() - started) * 1000
    logger.info(
        f"Import complete: mode={mode.value} total={result.total} "
        f"inserted={result.inserted} skipped={result.skipped_duplicates}"
    )
    return result


def export_all(store: StorePort, indent: int | None = 2) -> bytes:
    """Serialize every complete note in the store, newest first.

    Has no effect on the store.

    Raises:
        StoreError: If fetching fails.
        EncodeError: If serialization fails.
    """
    with store_lock(store):
        notes = store.fetch_all_sorted()

    records = to_wire(notes)
    data = encode(records, indent=indent)
    logger.info(f"Exported {len(records)} of {len(notes)} notes")
    return data


def delete_all(store: StorePort) -> int:
    """Remove every note and commit. Safe on an empty store.

    Returns:
        Number of notes removed.
    """
    with store_lock(store):
        try:
            removed = store.delete_all()
            store.commit()
        except Exception:
            _rollback(store)
            raise

    logger.info(f"All notes deleted ({removed} removed)")
    return removed
