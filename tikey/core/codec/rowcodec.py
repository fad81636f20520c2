import struct

from tikey.core.codec import jsonbin
from tikey.core.codec.decimal import decode_decimal
from tikey.core.codec.memcomparable import Flag, decode_float, decode_one
from tikey.core.errors import InvalidEncodedValueError
from tikey.core.models.datum import Datum, Kind
from tikey.core.models.fieldtype import (
    BLOB_TYPES,
    INTEGER_TYPES,
    STRING_TYPES,
    TIME_TYPES,
    FieldType,
    TypeCode,
)
from tikey.core.models.mytypes import (
    Duration,
    EnumValue,
    Time,
    binary_literal_from_uint,
    parse_enum_value,
    parse_set_value,
)

CODEC_VER = 128
LARGE_FLAG = 1

V2_HEADER_SIZE = 6     # version:1 | flag:1 | not null count:2 | null count:2
COMPACT_INT_SIZES = (1, 2, 4, 8)

NUMBER_BACKED_TYPES = TIME_TYPES | {
    TypeCode.DURATION,
    TypeCode.ENUM,
    TypeCode.SET,
    TypeCode.BIT,
}


def is_new_format(buf: bytes) -> bool:
    return len(buf) > 0 and buf[0] == CODEC_VER


def decode_row(buf: bytes, columns: dict[int, FieldType]) -> dict[int, Datum] | None:
    """
    Deserialize a stored row value into ``{column_id: Datum}`` for the
    requested columns.

    Returns None when the payload carries no row at all (empty, or a single
    nil flag). Columns absent from the payload are absent from the result.
    """
    if not buf:
        return None

    if is_new_format(buf):
        return _decode_v2(buf, columns)

    if len(buf) == 1 and buf[0] == Flag.NIL:
        return None

    return _decode_v1(buf, columns)


def _decode_v1(buf: bytes, columns: dict[int, FieldType]) -> dict[int, Datum]:
    """Old format: a flat sequence of (column id, value) encoded pairs."""
    row: dict[int, Datum] = {}
    rest = bytes(buf)

    while rest:
        cid, rest = decode_one(rest)
        if cid.kind not in (Kind.INT64, Kind.UINT64):
            raise InvalidEncodedValueError(f"invalid column id {cid!r}")

        value, rest = decode_one(rest)

        ft = columns.get(cid.value)
        if ft is None:
            continue

        row[cid.value] = unflatten(value, ft)
        if len(row) == len(columns):
            break

    return row


def unflatten(datum: Datum, ft: FieldType) -> Datum:
    """Give a raw stored datum the kind its declared column type implies."""
    if datum.is_null:
        return datum

    tp = ft.tp

    if tp == TypeCode.FLOAT and isinstance(datum.value, float):
        return Datum(Kind.FLOAT32, datum.value)

    if tp in STRING_TYPES and isinstance(datum.value, (bytes, str)):
        return Datum(Kind.STRING, _text(datum.value))

    if tp in NUMBER_BACKED_TYPES and not isinstance(datum.value, int):
        # stored kind does not fit the declared type
        return Datum(Kind.RAW, datum.value)

    if tp in TIME_TYPES:
        return Datum(Kind.TIME, Time.from_packed(datum.value, tp=tp, fsp=ft.decimal))

    if tp == TypeCode.DURATION:
        return Datum(Kind.DURATION, Duration(datum.value, fsp=ft.decimal))

    if tp == TypeCode.ENUM:
        return _enum_datum(ft, datum.value)

    if tp == TypeCode.SET:
        return _set_datum(ft, datum.value)

    if tp == TypeCode.BIT:
        return _bit_datum(ft, datum.value)

    return datum


def _decode_v2(buf: bytes, columns: dict[int, FieldType]) -> dict[int, Datum]:
    """
    Row format v2:

        128 | flag | not_null:u16 | null:u16
            | column ids (u8, or u32 when large)
            | end offsets of not-null values (u16, or u32 when large)
            | values

    Column ids are sorted within the not-null and null groups.
    """
    if len(buf) < V2_HEADER_SIZE:
        raise InvalidEncodedValueError("insufficient bytes to decode row header")

    large = bool(buf[1] & LARGE_FLAG)
    not_null, null = struct.unpack_from("<HH", buf, 2)
    id_fmt, off_fmt = ("I", "I") if large else ("B", "H")
    id_size = struct.calcsize(id_fmt)
    off_size = struct.calcsize(off_fmt)

    pos = V2_HEADER_SIZE
    ids_end = pos + (not_null + null) * id_size
    offs_end = ids_end + not_null * off_size
    if len(buf) < offs_end:
        raise InvalidEncodedValueError("insufficient bytes to decode row header")

    ids = struct.unpack_from(f"<{not_null + null}{id_fmt}", buf, pos)
    offsets = struct.unpack_from(f"<{not_null}{off_fmt}", buf, ids_end)
    data = bytes(buf[offs_end:])

    row: dict[int, Datum] = {}
    start = 0
    for i, cid in enumerate(ids[:not_null]):
        end = offsets[i]
        if end > len(data) or end < start:
            raise InvalidEncodedValueError(f"invalid offset {end} for column {cid}")
        if cid in columns:
            row[cid] = _decode_v2_column(data[start:end], columns[cid])
        start = end

    for cid in ids[not_null:]:
        if cid in columns:
            row[cid] = Datum(Kind.NULL)

    return row


def _decode_v2_column(data: bytes, ft: FieldType) -> Datum:
    try:
        return _decode_v2_value(data, ft)
    except InvalidEncodedValueError:
        # keep the raw bytes, rendering reports the failure for this column only
        return Datum(Kind.RAW, data)


def _decode_v2_value(data: bytes, ft: FieldType) -> Datum:
    tp = ft.tp

    if tp in INTEGER_TYPES:
        if ft.unsigned:
            return Datum(Kind.UINT64, _compact_int(data, signed=False))
        return Datum(Kind.INT64, _compact_int(data, signed=True))

    if tp in (TypeCode.FLOAT, TypeCode.DOUBLE):
        value, _ = decode_float(data)
        kind = Kind.FLOAT32 if tp == TypeCode.FLOAT else Kind.FLOAT64
        return Datum(kind, value)

    if tp in STRING_TYPES:
        return Datum(Kind.STRING, _text(data))

    if tp in BLOB_TYPES:
        return Datum(Kind.BYTES, data)

    if tp in (TypeCode.NEWDECIMAL, TypeCode.DECIMAL):
        value, precision, frac, _ = decode_decimal(data)
        return Datum(Kind.DECIMAL, value, frac=frac, length=precision)

    if tp in TIME_TYPES:
        packed = _compact_int(data, signed=False)
        return Datum(Kind.TIME, Time.from_packed(packed, tp=tp, fsp=ft.decimal))

    if tp == TypeCode.DURATION:
        return Datum(Kind.DURATION, Duration(_compact_int(data, signed=True), fsp=ft.decimal))

    if tp == TypeCode.ENUM:
        return _enum_datum(ft, _compact_int(data, signed=False))

    if tp == TypeCode.SET:
        return _set_datum(ft, _compact_int(data, signed=False))

    if tp == TypeCode.BIT:
        return _bit_datum(ft, _compact_int(data, signed=False))

    if tp == TypeCode.JSON:
        if not data:
            raise InvalidEncodedValueError("empty json value")
        return Datum(Kind.JSON, jsonbin.decode(data[0], data[1:]))

    return Datum(Kind.RAW, data)


def _compact_int(data: bytes, signed: bool) -> int:
    if len(data) not in COMPACT_INT_SIZES:
        raise InvalidEncodedValueError(f"invalid compact integer size {len(data)}")
    return int.from_bytes(data, "little", signed=signed)


def _enum_datum(ft: FieldType, number: int) -> Datum:
    try:
        value = parse_enum_value(ft.elements, number)
    except ValueError:
        value = EnumValue(name="", value=0)
    return Datum(Kind.ENUM, value)


def _set_datum(ft: FieldType, number: int) -> Datum:
    try:
        return Datum(Kind.SET, parse_set_value(ft.elements, number))
    except ValueError:
        return Datum(Kind.RAW, number)


def _bit_datum(ft: FieldType, number: int) -> Datum:
    byte_size = (ft.flen + 7) >> 3
    return Datum(Kind.BIT, binary_literal_from_uint(number, byte_size))


def _text(value: bytes | str) -> str:
    if isinstance(value, str):
        return value
    return bytes(value).decode("utf-8", errors="backslashreplace")

