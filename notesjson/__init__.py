"""notesjson - export and import personal notes as portable JSON."""

from .errors import DecodeError, EncodeError, NoteFileError, NotesError, StoreError
from .exchange import (
    ImportMode,
    ImportResult,
    NoteKey,
    NoteRecord,
    decode,
    delete_all,
    encode,
    export_all,
    export_to_file,
    import_batch,
    import_from_file,
    key_of,
    to_wire,
)
from .store import InMemoryNoteStore, Note, SQLiteNoteStore, StorePort

__version__ = "0.1.0"

__all__ = [
    "NotesError",
    "DecodeError",
    "EncodeError",
    "StoreError",
    "NoteFileError",
    "Note",
    "NoteRecord",
    "NoteKey",
    "ImportMode",
    "ImportResult",
    "StorePort",
    "SQLiteNoteStore",
    "InMemoryNoteStore",
    "to_wire",
    "encode",
    "decode",
    "key_of",
    "import_batch",
    "export_all",
    "delete_all",
    "export_to_file",
    "import_from_file",
]
