"""Shared fixtures for notesjson tests."""

import pytest

from notesjson.store import InMemoryNoteStore, SQLiteNoteStore


@pytest.fixture
def sqlite_store():
    """Create an in-memory SQLite note store."""
    store = SQLiteNoteStore(":memory:")
    store.connect()
    yield store
    store.close()


@pytest.fixture
def memory_store():
    """Create an empty map-backed note store."""
    return InMemoryNoteStore()


@pytest.fixture(params=["sqlite", "memory"])
def store(request):
    """Run a test against each store backend."""
    if request.param == "sqlite":
        s = SQLiteNoteStore(":memory:")
        s.connect()
        yield s
        s.close()
    else:
        yield InMemoryNoteStore()
