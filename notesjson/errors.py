"""Error taxonomy for note export/import."""


class NotesError(Exception):
    """Base class for all notesjson failures."""


class DecodeError(NotesError):
    """Import input is not a valid notes document."""


class EncodeError(NotesError):
    """Notes could not be serialized for export."""


class StoreError(NotesError):
    """The persistence layer failed a fetch, insert, delete or commit."""


class NoteFileError(NotesError):
    """Reading or writing a notes file failed."""
