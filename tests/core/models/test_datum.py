from decimal import Decimal

import pytest

from tikey.core.models.datum import Datum, Kind, format_float
from tikey.core.models.mytypes import Duration, EnumValue, SetValue


@pytest.mark.ut
@pytest.mark.parametrize(
    "datum, text",
    [
        (Datum(Kind.NULL), "NULL"),
        (Datum(Kind.INT64, -42), "-42"),
        (Datum(Kind.UINT64, 2**64 - 1), "18446744073709551615"),
        (Datum(Kind.FLOAT64, 1.0), "1"),
        (Datum(Kind.FLOAT64, 0.1), "0.1"),
        (Datum(Kind.FLOAT64, 1e20), "100000000000000000000"),
        (Datum(Kind.FLOAT32, 0.1), "0.1"),
        (Datum(Kind.STRING, "abc"), "abc"),
        (Datum(Kind.BYTES, b"abc"), "abc"),
        (Datum(Kind.BYTES, b"a\xff\xfeb"), "a\\xff\\xfeb"),
        (Datum(Kind.BIT, b"\x00\x05"), "0x0005"),
        (Datum(Kind.DECIMAL, Decimal("-0.50")), "-0.50"),
        (Datum(Kind.DURATION, Duration(-1_500_000_000, fsp=1)), "-00:00:01.5"),
        (Datum(Kind.ENUM, EnumValue("b", 2)), "b"),
        (Datum(Kind.SET, SetValue("a,c", 5)), "a,c"),
        (Datum(Kind.JSON, {"a": [1, "é"]}), '{"a": [1, "é"]}'),
        (Datum(Kind.MIN_NOT_NULL), "MinNotNull"),
        (Datum(Kind.MAX_VALUE), "MaxValue"),
    ],
)
def test_to_string(datum, text):
    assert datum.to_string() == text


@pytest.mark.ut
@pytest.mark.parametrize("kind", [Kind.RAW, Kind.INTERFACE])
def test_to_string_rejects_kinds_without_text(kind):
    with pytest.raises(ValueError):
        Datum(kind, b"\x01").to_string()


@pytest.mark.ut
def test_kind_labels_are_stable():
    assert [k.label for k in Kind] == [
        "null", "bigint", "unsigned bigint", "float", "double", "char", "bytes",
        "bit/hex literal", "decimal", "time", "enum", "bit", "set", "datetime",
        "interface", "min_not_null", "max_value", "raw", "json",
    ]


@pytest.mark.ut
def test_format_float_special_values():
    assert format_float(float("nan")) == "NaN"
    assert format_float(float("inf")) == "+Inf"
    assert format_float(float("-inf")) == "-Inf"
    assert format_float(-2.5) == "-2.5"
    assert format_float(1.100000023841858, bits=32) == "1.1"
