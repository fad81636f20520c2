from decimal import Decimal

import pytest

from tikey.core.codec.decimal import bin_size, decode_decimal
from tikey.core.errors import InvalidEncodedValueError


@pytest.mark.ut
def test_bin_size():
    assert bin_size(2, 1) == 2
    assert bin_size(10, 0) == 5
    assert bin_size(18, 9) == 8
    assert bin_size(65, 30) == 30


@pytest.mark.ut
def test_decode_positive_and_negative():
    value, precision, frac, rest = decode_decimal(bytes.fromhex("0201" "8105") + b"z")
    assert (value, precision, frac, rest) == (Decimal("1.5"), 2, 1, b"z")

    value, *_ = decode_decimal(bytes.fromhex("0201" "7efa"))
    assert value == Decimal("-1.5")


@pytest.mark.ut
def test_decode_full_words():
    # DECIMAL(18, 9): 123456789.000000001
    buf = bytes([18, 9]) + (0x80000000 | 123456789).to_bytes(4, "big") + (1).to_bytes(4, "big")
    value, *_ = decode_decimal(buf)
    assert value == Decimal("123456789.000000001")
    assert format(value, "f") == "123456789.000000001"


@pytest.mark.ut
def test_decode_keeps_precision_beyond_default_context():
    digits = "9" * 40
    # 40 integer digits: lead of 4 digits (2 bytes) + 4 full words
    buf = bytes([40, 0]) + (0x8000 | 9999).to_bytes(2, "big") + (999999999).to_bytes(4, "big") * 4
    value, *_ = decode_decimal(buf)
    assert format(value, "f") == digits


@pytest.mark.ut
@pytest.mark.parametrize(
    "buf",
    [
        b"\x02",
        bytes.fromhex("0000"),
        bytes.fromhex("0203" "8105"),
        bytes.fromhex("0201" "81"),
        bytes.fromhex("0201" "8f05"),
    ],
)
def test_decode_rejects_malformed_input(buf):
    with pytest.raises(InvalidEncodedValueError):
        decode_decimal(buf)
