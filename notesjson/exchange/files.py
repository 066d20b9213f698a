"""Reading and writing notes files."""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from ..errors import NoteFileError
from ..store.base import StorePort
from .codec import decode
from .engine import export_all, import_batch
from .models import ImportMode, ImportResult

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_DIR = "~/Documents"


def export_filename(now: datetime | None = None) -> str:
    """Build an export file name like ``notes-2025-11-17T09-30-00Z.json``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return f"notes-{stamp.replace(':', '-')}.json"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_atomic(path: str | Path, data: bytes) -> Path:
    """Write bytes so the final path is either absent or complete.

    Data goes to a temporary file in the same directory, which is then
    renamed over the target.

    Raises:
        NoteFileError: If the write fails.
    """
    path = Path(path).expanduser()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; give the export normal umask permissions
            os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise NoteFileError(f"Failed to write {path}: {e}") from e

    return path


def read_bytes(path: str | Path) -> bytes:
    """Read a notes file.

    Raises:
        NoteFileError: If the file cannot be read.
    """
    path = Path(path).expanduser()
    try:
        return path.read_bytes()
    except OSError as e:
        raise NoteFileError(f"Failed to read {path}: {e}") from e


def export_to_file(
    store: StorePort,
    directory: str | Path | None = None,
    now: datetime | None = None,
    indent: int | None = 2,
) -> Path:
    """Export all notes to a timestamped file.

    Args:
        store: Store to export from.
        directory: Target directory. Defaults to ~/Documents.
        now: Export instant used in the file name. Defaults to now.
        indent: JSON indentation, or None for compact output.

    Returns:
        Path of the written file.
    """
    directory = Path(directory or DEFAULT_EXPORT_DIR).expanduser()
    data = export_all(store, indent=indent)
    path = write_atomic(directory / export_filename(now), data)
    logger.info(f"Exported to: {path}")
    return path


def import_from_file(
    path: str | Path,
    mode: ImportMode | str,
    store: StorePort,
) -> ImportResult:
    """Import notes from a file.

    The whole file is decoded before the store is touched, so a malformed
    file never deletes or inserts anything.

    Raises:
        NoteFileError: If the file cannot be read.
        DecodeError: If the file is not a valid notes document.
    """
    records = decode(read_bytes(path))
    logger.debug(f"Decoded {len(records)} notes from {path}")
    return import_batch(records, mode, store)
