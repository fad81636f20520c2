import struct
from enum import IntEnum

from tikey.core.codec import jsonbin
from tikey.core.codec.decimal import decode_decimal
from tikey.core.errors import InvalidEncodedValueError
from tikey.core.models.datum import Datum, Kind
from tikey.core.models.mytypes import MAX_FSP, Duration

ENC_GROUP_SIZE = 8
ENC_MARKER = 0xFF
ENC_PAD = 0x00

SIGN_MASK = 0x8000_0000_0000_0000
UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF

MAX_VARINT_LEN = 10


class Flag(IntEnum):
    """Leading byte of an encoded value, selecting its decoding rule."""
    NIL = 0
    BYTES = 1
    COMPACT_BYTES = 2
    INT = 3
    UINT = 4
    FLOAT = 5
    DECIMAL = 6
    DURATION = 7
    VARINT = 8
    UVARINT = 9
    JSON = 10
    MAX = 250


def encode_bytes(data: bytes) -> bytes:
    """
    Memcomparable encoding of a byte string.

    The input is cut into groups of 8 bytes. Each group is right-padded
    with zeros and followed by a marker ``0xFF - pad``. A full trailing
    group is followed by an empty, fully padded one, so the marker of the
    last group always tells how many bytes to drop. The encoding of a
    prefix sorts before the encoding of any longer string sharing it.
    """
    out = bytearray()
    size = len(data)

    for idx in range(0, size + 1, ENC_GROUP_SIZE):
        group = data[idx:idx + ENC_GROUP_SIZE]
        pad = ENC_GROUP_SIZE - len(group)
        out += group
        out += bytes([ENC_PAD]) * pad
        out.append(ENC_MARKER - pad)

    return bytes(out)


def decode_bytes(buf: bytes, partial: bool = False) -> tuple[bytes, bytes]:
    """
    Inverse of ``encode_bytes``: strip every marker byte and the padding
    declared by the final group. Returns (value, rest).

    With ``partial`` a trailing group cut off before its marker is kept
    as is instead of being rejected.
    """
    out = bytearray()
    pos = 0

    while True:
        group_end = pos + ENC_GROUP_SIZE
        if len(buf) < group_end + 1:
            if partial:
                out += buf[pos:]
                pos = len(buf)
                break
            raise InvalidEncodedValueError("insufficient bytes to decode value")

        group = buf[pos:group_end]
        pad = ENC_MARKER - buf[group_end]
        if pad > ENC_GROUP_SIZE:
            raise InvalidEncodedValueError(
                f"invalid marker byte, group bytes {buf[pos:group_end + 1]!r}"
            )

        real = ENC_GROUP_SIZE - pad
        out += group[:real]
        pos = group_end + 1

        if pad:
            if any(b != ENC_PAD for b in group[real:]):
                raise InvalidEncodedValueError(
                    f"invalid padding byte, group bytes {buf[pos - ENC_GROUP_SIZE - 1:pos]!r}"
                )
            break

    return bytes(out), bytes(buf[pos:])


def encode_uint(prefix: bytes, value: int) -> bytes:
    return bytes(prefix) + (value & UINT64_MASK).to_bytes(8, "big")


def encode_int(prefix: bytes, value: int) -> bytes:
    """Append ``value`` as 8 big-endian bytes with the sign bit flipped."""
    return encode_uint(prefix, (value & UINT64_MASK) ^ SIGN_MASK)


def decode_uint(buf: bytes) -> tuple[int, bytes]:
    if len(buf) < 8:
        raise InvalidEncodedValueError("insufficient bytes to decode value")
    return int.from_bytes(buf[:8], "big"), bytes(buf[8:])


def decode_int(buf: bytes) -> tuple[int, bytes]:
    u, rest = decode_uint(buf)
    v = u ^ SIGN_MASK
    if v & SIGN_MASK:
        v -= 1 << 64
    return v, rest


def decode_float(buf: bytes) -> tuple[float, bytes]:
    """Comparable float64: positive values have the sign bit set, negatives are inverted."""
    u, rest = decode_uint(buf)
    if u & SIGN_MASK:
        u &= ~SIGN_MASK
    else:
        u = ~u & UINT64_MASK
    return struct.unpack(">d", u.to_bytes(8, "big"))[0], rest


def encode_uvarint(value: int) -> bytes:
    out = bytearray()
    value &= UINT64_MASK
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_varint(value: int) -> bytes:
    zigzag = (value << 1) ^ (value >> 63)
    return encode_uvarint(zigzag)


def decode_uvarint(buf: bytes) -> tuple[int, bytes]:
    result = 0
    shift = 0
    for i, b in enumerate(buf[:MAX_VARINT_LEN]):
        if b < 0x80:
            if i == MAX_VARINT_LEN - 1 and b > 1:
                break
            return result | (b << shift), bytes(buf[i + 1:])
        result |= (b & 0x7F) << shift
        shift += 7
    else:
        raise InvalidEncodedValueError("insufficient bytes to decode value")

    raise InvalidEncodedValueError("value larger than 64 bits")


def decode_varint(buf: bytes) -> tuple[int, bytes]:
    ux, rest = decode_uvarint(buf)
    x = ux >> 1
    if ux & 1:
        x = ~x
    return x, rest


def encode_compact_bytes(data: bytes) -> bytes:
    return encode_varint(len(data)) + bytes(data)


def decode_compact_bytes(buf: bytes) -> tuple[bytes, bytes]:
    length, rest = decode_varint(buf)
    if length < 0 or len(rest) < length:
        raise InvalidEncodedValueError("insufficient bytes to decode value")
    return bytes(rest[:length]), bytes(rest[length:])


def decode_one(buf: bytes) -> tuple[Datum, bytes]:
    """
    Decode one flag-prefixed value. Returns (datum, rest).

    Raises InvalidEncodedValueError on an unknown flag or when the payload
    the flag announces is truncated.
    """
    if not buf:
        raise InvalidEncodedValueError("invalid encoded key: empty buffer")

    flag = buf[0]
    body = bytes(buf[1:])

    match flag:
        case Flag.NIL:
            return Datum(Kind.NULL), body
        case Flag.INT:
            v, rest = decode_int(body)
            return Datum(Kind.INT64, v), rest
        case Flag.UINT:
            v, rest = decode_uint(body)
            return Datum(Kind.UINT64, v), rest
        case Flag.VARINT:
            v, rest = decode_varint(body)
            return Datum(Kind.INT64, v), rest
        case Flag.UVARINT:
            v, rest = decode_uvarint(body)
            return Datum(Kind.UINT64, v), rest
        case Flag.FLOAT:
            f, rest = decode_float(body)
            return Datum(Kind.FLOAT64, f), rest
        case Flag.BYTES:
            b, rest = decode_bytes(body)
            return Datum(Kind.BYTES, b), rest
        case Flag.COMPACT_BYTES:
            b, rest = decode_compact_bytes(body)
            return Datum(Kind.BYTES, b), rest
        case Flag.DECIMAL:
            dec, precision, frac, rest = decode_decimal(body)
            return Datum(Kind.DECIMAL, dec, frac=frac, length=precision), rest
        case Flag.DURATION:
            nanos, rest = decode_int(body)
            return Datum(Kind.DURATION, Duration(nanos, fsp=MAX_FSP)), rest
        case Flag.JSON:
            size = jsonbin.peek_size(body)
            doc = jsonbin.decode(body[0], body[1:size])
            return Datum(Kind.JSON, doc), body[size:]
        case Flag.MAX:
            return Datum(Kind.MAX_VALUE), body

    raise InvalidEncodedValueError(f"invalid encoded key flag {flag}")
