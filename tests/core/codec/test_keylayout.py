import pytest

from tikey.core.codec.escape import decode_escaped
from tikey.core.codec.keylayout import (
    COMPACT,
    PADDED,
    KeyKind,
    decode_index_values,
    detect_layout,
    parse_index_key,
    parse_row_key,
)
from tikey.core.codec.memcomparable import encode_bytes, encode_int
from tikey.core.errors import UnrecognizedKeyFormatError
from tikey.core.models.datum import Kind

ROW_KEY = b"t\x80\x00\x00\x00\x00\x00\x07\x8f_r\x80\x00\x00\x00\x00\x08\x3b\xba"
PADDED_ROW_KEY = decode_escaped(
    r"t\200\000\000\000\000\000\025\377\316_r\200\000\001j\331\377\357vI\000\000\000\000\000\372"
)
INDEX_KEY = (
    b"t\x80\x00\x00\x00\x00\x00\x00\x5f_i\x80\x00\x00\x00\x00\x00\x00\x01"
    b"\x03\x80\x00\x00\x00\x00\x00\x00\x02\x03\x80\x00\x00\x00\x00\x00\x00\x02"
)


@pytest.mark.ut
def test_parse_compact_row_key():
    row = parse_row_key(ROW_KEY)
    assert (row.table_id, row.row_id) == (1935, 539578)
    assert row.to_dict() == {"format": "table_row", "table_id": 1935, "row_id": 539578}


@pytest.mark.ut
def test_parse_padded_row_key():
    assert detect_layout(PADDED_ROW_KEY, KeyKind.ROW) is PADDED

    row = parse_row_key(PADDED_ROW_KEY)
    assert (row.table_id, row.row_id) == (5582, 1558434510409)


@pytest.mark.ut
def test_padded_key_built_from_compact_key():
    compact = encode_int(encode_int(b"t", 42) + b"_r", -7)
    padded = encode_bytes(compact)

    assert detect_layout(compact, KeyKind.ROW) is COMPACT
    assert parse_row_key(padded) == parse_row_key(compact)
    assert parse_row_key(padded).row_id == -7


@pytest.mark.ut
def test_parse_index_key_values():
    index = parse_index_key(INDEX_KEY)
    assert (index.table_id, index.index_id) == (95, 1)
    assert [(v.kind, v.text) for v in index.values] == [
        (Kind.INT64, "2"),
        (Kind.INT64, "2"),
    ]
    assert index.to_dict()["index_values"] == [
        {"type": "bigint", "value": "2"},
        {"type": "bigint", "value": "2"},
    ]


@pytest.mark.ut
def test_parse_index_key_drops_truncated_trailing_value():
    key = decode_escaped(
        r"t\200\000\000\000\000\000\000\255_i\200\000\000\000\000\000\000\001"
        r"\003\200\000\000\000\000e\221|\003\200\000\000\000\0008\307\024"
        r"\003\200\000\000\000\0014\025\230\003\200\000\000\000"
    )
    index = parse_index_key(key)
    assert (index.table_id, index.index_id) == (173, 1)
    assert [v.text for v in index.values] == ["6656380", "3720980", "20190616"]


@pytest.mark.ut
def test_padded_index_key():
    padded = encode_bytes(INDEX_KEY)
    index = parse_index_key(padded)
    assert (index.table_id, index.index_id) == (95, 1)
    assert [v.text for v in index.values] == ["2", "2"]


@pytest.mark.ut
def test_padded_keys_cut_inside_last_group():
    row = parse_row_key(PADDED_ROW_KEY[:PADDED.min_len])
    assert (row.table_id, row.row_id) == (5582, 1558434510409)

    index = parse_index_key(encode_bytes(INDEX_KEY)[:40])
    assert (index.table_id, index.index_id) == (95, 1)
    assert [v.text for v in index.values] == ["2"]


@pytest.mark.ut
def test_row_parser_rejects_index_key_and_vice_versa():
    with pytest.raises(UnrecognizedKeyFormatError):
        parse_row_key(INDEX_KEY)
    with pytest.raises(UnrecognizedKeyFormatError):
        parse_index_key(ROW_KEY)


@pytest.mark.ut
@pytest.mark.parametrize("buf", [b"", b"t", ROW_KEY[:18], b"x" + ROW_KEY[1:], b"m" * 30])
def test_short_or_foreign_buffers_are_rejected(buf):
    with pytest.raises(UnrecognizedKeyFormatError):
        parse_row_key(buf)


@pytest.mark.ut
def test_padded_signature_with_bad_groups_is_rejected():
    buf = b"t" + b"\x00" * 9 + b"_r" + b"\x00" * 10
    assert detect_layout(buf, KeyKind.ROW) is PADDED
    with pytest.raises(UnrecognizedKeyFormatError):
        parse_row_key(buf)


@pytest.mark.ut
def test_decode_index_values_stops_at_first_bad_value():
    buf = b"\x03" + encode_int(b"", 9) + b"\xee\x00"
    values = decode_index_values(buf)
    assert [(v.type_name, v.text) for v in values] == [("bigint", "9")]
    assert decode_index_values(b"") == []
