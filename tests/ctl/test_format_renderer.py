import json

import pytest
import yaml

from tikey.core.codec.keyrange import KeyRanges, global_ranges, table_ranges
from tikey.core.models.datum import Kind
from tikey.core.models.result import (
    BareValues,
    ColumnOutcome,
    DecodedRow,
    FieldStatus,
    IndexValue,
    TableIndex,
    TableRow,
)
from tikeyctl.infra.format_renderer import JsonRenderer, TextRenderer, YamlRenderer


@pytest.mark.ut
def test_text_table_row():
    text = TextRenderer().render(TableRow(1935, 539578).to_dict())
    assert text == "format: table_row\ntable_id: 1935\nrow_id: 539578"


@pytest.mark.ut
def test_text_table_index():
    index = TableIndex(95, 1, [IndexValue(Kind.INT64, "2"), IndexValue(Kind.BYTES, "abc")])
    assert TextRenderer().render(index.to_dict()).splitlines() == [
        "format: table_index",
        "table_id: 95",
        "index_id: 1",
        "index_value[0]: {type: bigint, value: 2}",
        "index_value[1]: {type: bytes, value: abc}",
    ]


@pytest.mark.ut
def test_text_bare_values():
    values = BareValues([IndexValue(Kind.INT64, "2")])
    assert TextRenderer().render(values.to_dict()) == (
        "format: index_value\nindex_value[0]: {type: bigint, value: 2}"
    )


@pytest.mark.ut
def test_text_row_value():
    row = DecodedRow([
        ColumnOutcome(1, "a", FieldStatus.VALUE, text="1"),
        ColumnOutcome(3, "c", FieldStatus.NULL),
        ColumnOutcome(5, "e", FieldStatus.NOT_FOUND),
        ColumnOutcome(6, "f", FieldStatus.ERROR, text="Datum(...)", error="cannot convert"),
    ])
    assert TextRenderer().render(row.to_dict()).splitlines() == [
        "a:\t1",
        "c is NULL",
        "e not found in data",
        "f ToString error: cannot convert datum: Datum(...)",
    ]


@pytest.mark.ut
def test_text_key_ranges():
    ranges = KeyRanges(global_ranges(), table_name="t1", table_ranges=table_ranges(1, [(1, "k")]))
    lines = TextRenderer().render(ranges.to_dict()).splitlines()

    assert lines[:3] == [
        "global ranges:",
        "  meta: (6d, 6e)",
        "  table: (74, 75)",
    ]
    assert lines[3] == "table t1 ranges: (NOTE: key range might be changed after DDL)"
    assert lines[4] == "  table: (748000000000000001, 748000000000000002)"
    assert lines[6].startswith("    index k: (")
    assert lines[7].startswith("  table rows: (")


@pytest.mark.ut
def test_text_fallback_lines():
    assert TextRenderer().render({"current_context": "a"}) == "current_context: a"
    assert TextRenderer().render({"contexts": ["a", "b"]}) == "contexts:\n  - a\n  - b"


@pytest.mark.ut
def test_structured_renderers_keep_data():
    data = TableRow(1, 2).to_dict()
    assert json.loads(JsonRenderer().render(data)) == data
    assert yaml.safe_load(YamlRenderer().render(data)) == data

    unicode_row = {"value": "哈哈"}
    assert "哈哈" in JsonRenderer().render(unicode_row)
    assert "哈哈" in YamlRenderer().render(unicode_row)
