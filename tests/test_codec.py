"""Tests for the notes JSON codec."""

import json
from datetime import datetime, timezone

import pytest

from notesjson.errors import DecodeError, EncodeError
from notesjson.exchange import NoteRecord, decode, encode, to_wire
from notesjson.store import Note


def ts(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@pytest.fixture
def records():
    """Records with distinct, sub-second timestamps."""
    return [
        NoteRecord("Newest", "body 3", datetime(2025, 11, 17, 9, 30, 0, 999999, tzinfo=timezone.utc)),
        NoteRecord("Unicode ✓", "naïve café\nline two", datetime(2025, 11, 17, 9, 30, 0, 1, tzinfo=timezone.utc)),
        NoteRecord("", "", datetime(1970, 1, 1, tzinfo=timezone.utc)),
    ]


class TestToWire:
    """Tests for mapping stored notes to records."""

    def test_maps_one_to_one_in_order(self):
        notes = [Note("b", "2", ts(2), id=7), Note("a", "1", ts(1), id=3)]

        assert to_wire(notes) == [NoteRecord("b", "2", ts(2)), NoteRecord("a", "1", ts(1))]

    def test_drops_incomplete_notes(self):
        notes = [
            Note(None, "no title", ts(1)),
            Note("keep", "x", ts(2)),
            Note("no body", None, ts(3)),
            Note("no time", "x", None),
        ]

        assert to_wire(notes) == [NoteRecord("keep", "x", ts(2))]

    def test_empty_strings_are_present(self):
        assert to_wire([Note("", "", ts(1))]) == [NoteRecord("", "", ts(1))]


class TestEncode:
    """Tests for serializing records."""

    def test_array_of_three_key_objects(self, records):
        parsed = json.loads(encode(records))

        assert isinstance(parsed, list)
        assert len(parsed) == 3
        for item in parsed:
            assert set(item) == {"title", "content", "timestamp"}

    def test_timestamp_format(self):
        data = encode([NoteRecord("A", "x", datetime(2025, 11, 17, 9, 30, 0, 123456, tzinfo=timezone.utc))])

        assert json.loads(data)[0]["timestamp"] == "2025-11-17T09:30:00.123456+00:00"

    def test_utf8_output(self, records):
        data = encode(records)
        assert "naïve café".encode("utf-8") in data

    def test_compact_output(self, records):
        assert b"\n" not in encode(records, indent=None)

    def test_empty(self):
        assert json.loads(encode([])) == []

    def test_unserializable_input_raises(self):
        with pytest.raises(EncodeError):
            encode([object()])


class TestDecode:
    """Tests for parsing JSON input."""

    def test_round_trip(self, records):
        assert decode(encode(records)) == records

    def test_round_trip_from_stored_notes(self):
        notes = [
            Note("b", "2", datetime(2025, 1, 1, 0, 0, 0, 654321, tzinfo=timezone.utc)),
            Note("a", "1", datetime(2024, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc)),
        ]
        wire = to_wire(notes)

        assert decode(encode(wire)) == wire

    def test_accepts_str(self):
        text = '[{"title": "A", "content": "x", "timestamp": "2025-01-01T00:00:00.000000+00:00"}]'

        assert decode(text) == [NoteRecord("A", "x", datetime(2025, 1, 1, tzinfo=timezone.utc))]

    def test_other_offsets_normalized_to_utc(self):
        text = b'[{"title": "A", "content": "x", "timestamp": "2025-01-01T02:00:00+02:00"}]'

        [record] = decode(text)
        assert record.timestamp == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert record.timestamp.utcoffset().total_seconds() == 0

    def test_utf8_bom_accepted(self):
        data = b"\xef\xbb\xbf[]"
        assert decode(data) == []

    @pytest.mark.parametrize(
        "data",
        [
            b"not json",
            b'{"title": "A", "content": "x", "timestamp": "2025-01-01T00:00:00+00:00"}',
            b'"a string"',
            b"\xff\xfe",
        ],
    )
    def test_rejects_non_array_documents(self, data):
        with pytest.raises(DecodeError):
            decode(data)

    @pytest.mark.parametrize(
        "item",
        [
            {"title": "A", "content": "x"},
            {"title": "A", "timestamp": "2025-01-01T00:00:00+00:00"},
            {"content": "x", "timestamp": "2025-01-01T00:00:00+00:00"},
            {"title": 1, "content": "x", "timestamp": "2025-01-01T00:00:00+00:00"},
            {"title": "A", "content": None, "timestamp": "2025-01-01T00:00:00+00:00"},
            {"title": "A", "content": "x", "timestamp": 1700000000},
            {"title": "A", "content": "x", "timestamp": "yesterday"},
            {"title": "A", "content": "x", "timestamp": "2025-01-01T00:00:00+00:00", "id": 3},
            ["A", "x", "2025-01-01T00:00:00+00:00"],
        ],
    )
    def test_rejects_malformed_elements(self, item):
        with pytest.raises(DecodeError):
            decode(json.dumps([item]))

    def test_one_bad_element_fails_whole_batch(self, records):
        items = json.loads(encode(records))
        items.insert(1, {"title": "broken"})

        with pytest.raises(DecodeError, match="Note 1"):
            decode(json.dumps(items))

    @pytest.mark.parametrize(
        "stamp",
        ["0001-01-01T00:00:00+05:00", "9999-12-31T23:59:59-05:00"],
    )
    def test_timestamp_outside_utc_range(self, stamp):
        data = json.dumps([{"title": "A", "content": "x", "timestamp": stamp}])

        with pytest.raises(DecodeError, match="Note 0: invalid timestamp"):
            decode(data)

    def test_deeply_nested_input(self):
        with pytest.raises(DecodeError, match="nested too deeply"):
            decode(b"[" * 100000 + b"]" * 100000)

    @pytest.mark.parametrize("key", ["title", "content"])
    def test_lone_surrogate_rejected(self, key):
        item = {"title": "A", "content": "x", "timestamp": "2025-01-01T00:00:00+00:00"}
        item[key] = "\ud800"
        # Escaped in the JSON text, so the input itself is valid JSON
        data = json.dumps([item]).encode("ascii")

        with pytest.raises(DecodeError, match=f"{key} is not valid Unicode"):
            decode(data)

    def test_decoded_records_always_reencode(self):
        data = json.dumps(
            [{"title": "emoji \U0001f600", "content": "é", "timestamp": "2025-01-01T00:00:00+00:00"}]
        )

        records = decode(data)

        assert decode(encode(records)) == records
