import struct
from enum import IntEnum
from typing import Any

from tikey.core.errors import InvalidEncodedValueError


class JSONType(IntEnum):
    OBJECT = 0x01
    ARRAY = 0x03
    LITERAL = 0x04
    INT64 = 0x09
    UINT64 = 0x0A
    FLOAT64 = 0x0B
    STRING = 0x0C


LITERAL_NIL = 0x00
LITERAL_TRUE = 0x01
LITERAL_FALSE = 0x02

HEADER_SIZE = 8         # element count:4 | total size:4
KEY_ENTRY_SIZE = 6      # key offset:4 | key length:2
VALUE_ENTRY_SIZE = 5    # type:1 | offset or inlined literal:4

MAX_DEPTH = 100


def peek_size(buf: bytes) -> int:
    """Number of bytes (type code included) taken by the JSON value at ``buf``."""
    if not buf:
        raise InvalidEncodedValueError("insufficient bytes to decode json")

    code = buf[0]
    value = buf[1:]

    match code:
        case JSONType.OBJECT | JSONType.ARRAY:
            if len(value) < HEADER_SIZE:
                raise InvalidEncodedValueError("truncated json container header")
            size = struct.unpack_from("<I", value, 4)[0]
        case JSONType.LITERAL:
            size = 1
        case JSONType.INT64 | JSONType.UINT64 | JSONType.FLOAT64:
            size = 8
        case JSONType.STRING:
            length, width = _uvarint(value, 0)
            size = width + length
        case _:
            raise InvalidEncodedValueError(f"invalid json type code {code:#x}")

    if len(value) < size:
        raise InvalidEncodedValueError("insufficient bytes to decode json")
    return 1 + size


def decode(code: int, value: bytes) -> Any:
    """Decode a binary JSON value into plain Python objects."""
    try:
        return _Walker(budget=len(value) + 1).decode(code, value)
    except (IndexError, struct.error) as ex:
        raise InvalidEncodedValueError(f"malformed json value: {ex}") from ex


class _Walker:
    """
    Decodes one document. Every container entry must point past the
    container's entry table and inside its declared size; nesting is capped
    at MAX_DEPTH, and the number of decoded values at ``budget``.
    """

    def __init__(self, budget: int) -> None:
        self._budget = budget

    def decode(self, code: int, value: bytes, depth: int = 0) -> Any:
        self._budget -= 1
        if self._budget < 0:
            raise InvalidEncodedValueError("json document references more values than it holds")

        match code:
            case JSONType.OBJECT | JSONType.ARRAY:
                return self._container(code, value, depth)

            case JSONType.LITERAL:
                return _literal(value[0])

            case JSONType.INT64:
                return struct.unpack_from("<q", value, 0)[0]

            case JSONType.UINT64:
                return struct.unpack_from("<Q", value, 0)[0]

            case JSONType.FLOAT64:
                return struct.unpack_from("<d", value, 0)[0]

            case JSONType.STRING:
                length, width = _uvarint(value, 0)
                raw = value[width:width + length]
                if len(raw) < length:
                    raise InvalidEncodedValueError("truncated json string")
                return raw.decode("utf-8", errors="replace")

        raise InvalidEncodedValueError(f"invalid json type code {code:#x}")

    def _container(self, code: int, value: bytes, depth: int) -> Any:
        if depth >= MAX_DEPTH:
            raise InvalidEncodedValueError(f"json nesting deeper than {MAX_DEPTH}")

        count, size = struct.unpack_from("<II", value, 0)
        if size > len(value):
            raise InvalidEncodedValueError(f"json container size {size} exceeds {len(value)} bytes")

        is_object = code == JSONType.OBJECT
        entry_size = KEY_ENTRY_SIZE + VALUE_ENTRY_SIZE if is_object else VALUE_ENTRY_SIZE
        table_end = HEADER_SIZE + count * entry_size
        if table_end > size:
            raise InvalidEncodedValueError(f"json container of {size} bytes cannot hold {count} entries")

        container = value[:size]
        values_start = HEADER_SIZE + count * KEY_ENTRY_SIZE if is_object else HEADER_SIZE

        items = [
            self._value_entry(container, values_start + i * VALUE_ENTRY_SIZE, table_end, depth)
            for i in range(count)
        ]
        if not is_object:
            return items

        result = {}
        for i, item in enumerate(items):
            key_off, key_len = struct.unpack_from("<IH", container, HEADER_SIZE + i * KEY_ENTRY_SIZE)
            if key_off < table_end or key_off + key_len > size:
                raise InvalidEncodedValueError(f"json key offset {key_off} outside container")
            result[container[key_off:key_off + key_len].decode("utf-8", errors="replace")] = item
        return result

    def _value_entry(self, container: bytes, entry: int, table_end: int, depth: int) -> Any:
        code = container[entry]
        if code == JSONType.LITERAL:
            return _literal(container[entry + 1])

        offset = struct.unpack_from("<I", container, entry + 1)[0]
        if not table_end <= offset < len(container):
            raise InvalidEncodedValueError(f"json value offset {offset} outside container")
        return self.decode(code, container[offset:], depth + 1)


def _literal(byte: int) -> Any:
    if byte == LITERAL_NIL:
        return None
    if byte == LITERAL_TRUE:
        return True
    if byte == LITERAL_FALSE:
        return False
    raise InvalidEncodedValueError(f"invalid json literal {byte:#x}")


def _uvarint(buf: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    for i in range(pos, min(len(buf), pos + 10)):
        b = buf[i]
        result |= (b & 0x7F) << shift
        if b < 0x80:
            return result, i - pos + 1
        shift += 7
    raise InvalidEncodedValueError("insufficient bytes to decode json string length")
