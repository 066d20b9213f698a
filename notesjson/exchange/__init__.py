"""Export/import of notes as portable JSON.

Stored notes are mapped to portable records, serialized to a JSON array,
and reconciled back into a store in replace or merge mode.
"""

from .codec import decode, encode, to_wire
from .dedup import key_of
from .engine import delete_all, export_all, import_batch, store_lock
from .files import (
    export_filename,
    export_to_file,
    import_from_file,
    read_bytes,
    write_atomic,
)
from .models import ImportMode, ImportResult, NoteKey, NoteRecord

__all__ = [
    "NoteRecord",
    "NoteKey",
    "ImportMode",
    "ImportResult",
    "to_wire",
    "encode",
    "decode",
    "key_of",
    "import_batch",
    "export_all",
    "delete_all",
    "store_lock",
    "export_filename",
    "export_to_file",
    "import_from_file",
    "read_bytes",
    "write_atomic",
]
