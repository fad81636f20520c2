from unittest.mock import Mock

import pytest

from tikey.core.errors import EmptyPayloadError, MalformedBase64Error, NoRowDataError, SchemaLookupFailedError
from tikey.core.models.fieldtype import FieldType, TypeCode
from tikey.core.models.result import FieldStatus
from tikey.core.models.schema import ColumnSchema, TableInfo
from tikey.core.service.row import RowValueDecoder, TableRowDecoder

ROW_V1 = "CAIIAggEAhjlk4jlk4ggaGVsbG8IBgAICAmAgICI0Yyr0Rk="

COLUMNS = [
    ColumnSchema(1, "a", FieldType(Tp=TypeCode.LONG)),
    ColumnSchema(2, "b", FieldType(Tp=TypeCode.VARCHAR)),
    ColumnSchema(3, "c", FieldType(Tp=TypeCode.DATETIME)),
    ColumnSchema(4, "d", FieldType(Tp=TypeCode.TIMESTAMP)),
    ColumnSchema(5, "e", FieldType(Tp=TypeCode.VARCHAR)),
]


@pytest.mark.ut
def test_decode_row_outcomes():
    row = RowValueDecoder().decode(ROW_V1, COLUMNS)

    assert [(c.name, c.status, c.text) for c in row.columns] == [
        ("a", FieldStatus.VALUE, "1"),
        ("b", FieldStatus.VALUE, "哈哈 hello"),
        ("c", FieldStatus.NULL, ""),
        ("d", FieldStatus.VALUE, "2019-03-22 06:20:17"),
        ("e", FieldStatus.NOT_FOUND, ""),
    ]
    assert set(row.present) == {1, 2, 3, 4}
    assert row.columns[2].is_null
    assert not row.columns[4].found


@pytest.mark.ut
def test_decode_row_to_dict():
    data = RowValueDecoder().decode(ROW_V1, COLUMNS).to_dict()
    assert data["format"] == "table_row_value"
    assert data["columns"][0] == {"column_id": 1, "name": "a", "status": "value", "value": "1"}
    assert data["columns"][2] == {"column_id": 3, "name": "c", "status": "null"}


@pytest.mark.ut
def test_conversion_error_is_kept_per_column():
    # v2 row: column 1 holds 3 bytes, not a valid packed datetime
    payload = "gAABAAAAAQMAAQID"
    columns = [
        ColumnSchema(1, "ts", FieldType(Tp=TypeCode.DATETIME)),
        ColumnSchema(2, "other", FieldType(Tp=TypeCode.LONG)),
    ]

    row = RowValueDecoder().decode(payload, columns)

    assert row.columns[0].status == FieldStatus.ERROR
    assert "cannot convert" in row.columns[0].error
    assert row.columns[1].status == FieldStatus.NOT_FOUND


@pytest.mark.ut
def test_empty_payload():
    with pytest.raises(EmptyPayloadError):
        RowValueDecoder().decode("", COLUMNS)


@pytest.mark.ut
def test_nil_payload_holds_no_row():
    with pytest.raises(NoRowDataError):
        RowValueDecoder().decode("AA==", COLUMNS)


@pytest.mark.ut
def test_invalid_base64_payload():
    with pytest.raises(MalformedBase64Error):
        RowValueDecoder().decode("ThisIsNotBase64", COLUMNS)


@pytest.mark.ut
def test_table_row_decoder_uses_schema_lookup(table_json):
    lookup = Mock()
    lookup.lookup.return_value = TableInfo.model_validate(table_json)

    row = TableRowDecoder(lookup).decode("test.t1", ROW_V1)

    lookup.lookup.assert_called_once_with("test.t1")
    assert [c.name for c in row.columns] == ["a", "b", "c", "d", "e"]
    assert row.columns[3].text == "2019-03-22 06:20:17"


@pytest.mark.ut
def test_table_row_decoder_propagates_lookup_failure():
    lookup = Mock()
    lookup.lookup.side_effect = SchemaLookupFailedError("no such table")

    with pytest.raises(SchemaLookupFailedError):
        TableRowDecoder(lookup).decode("64", ROW_V1)
