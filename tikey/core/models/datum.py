import json
import math
import struct
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any


class Kind(IntEnum):
    """Type tag of a decoded scalar."""
    NULL = 0
    INT64 = 1
    UINT64 = 2
    FLOAT32 = 3
    FLOAT64 = 4
    STRING = 5
    BYTES = 6
    BINARY_LITERAL = 7
    DECIMAL = 8
    DURATION = 9
    ENUM = 10
    BIT = 11
    SET = 12
    TIME = 13
    INTERFACE = 14
    MIN_NOT_NULL = 15
    MAX_VALUE = 16
    RAW = 17
    JSON = 18

    @property
    def label(self) -> str:
        return KIND_NAMES[self]


KIND_NAMES: dict[Kind, str] = {
    Kind.NULL: "null",
    Kind.INT64: "bigint",
    Kind.UINT64: "unsigned bigint",
    Kind.FLOAT32: "float",
    Kind.FLOAT64: "double",
    Kind.STRING: "char",
    Kind.BYTES: "bytes",
    Kind.BINARY_LITERAL: "bit/hex literal",
    Kind.DECIMAL: "decimal",
    Kind.DURATION: "time",
    Kind.ENUM: "enum",
    Kind.BIT: "bit",
    Kind.SET: "set",
    Kind.TIME: "datetime",
    Kind.INTERFACE: "interface",
    Kind.MIN_NOT_NULL: "min_not_null",
    Kind.MAX_VALUE: "max_value",
    Kind.RAW: "raw",
    Kind.JSON: "json",
}


@dataclass(frozen=True, slots=True)
class Datum:
    """
    A decoded scalar and its type tag.

    ``value`` holds the Python form of the payload:
        INT64/UINT64            int
        FLOAT32/FLOAT64         float
        STRING                  str
        BYTES/BIT/BINARY_LITERAL bytes
        DECIMAL                 decimal.Decimal
        DURATION/TIME/ENUM/SET  the matching type from ``mytypes``
        JSON                    the decoded JSON document
        RAW                     whatever could not be interpreted

    ``frac`` and ``length`` carry the decimal scale/precision when known.
    """
    kind: Kind
    value: Any = None
    frac: int = 0
    length: int = 0

    @property
    def is_null(self) -> bool:
        return self.kind == Kind.NULL

    def to_string(self) -> str:
        """
        Canonical text of the value. Raises ValueError for kinds that have
        no textual form.
        """
        match self.kind:
            case Kind.NULL:
                return "NULL"
            case Kind.INT64 | Kind.UINT64:
                return str(self.value)
            case Kind.FLOAT32:
                return format_float(self.value, bits=32)
            case Kind.FLOAT64:
                return format_float(self.value, bits=64)
            case Kind.STRING:
                return self.value
            case Kind.BYTES:
                return bytes(self.value).decode("utf-8", errors="backslashreplace")
            case Kind.BIT | Kind.BINARY_LITERAL:
                return "0x" + bytes(self.value).hex()
            case Kind.DECIMAL:
                return format(self.value, "f")
            case Kind.DURATION | Kind.TIME | Kind.ENUM | Kind.SET:
                return str(self.value)
            case Kind.JSON:
                return json.dumps(self.value, ensure_ascii=False)
            case Kind.MIN_NOT_NULL:
                return "MinNotNull"
            case Kind.MAX_VALUE:
                return "MaxValue"

        raise ValueError(f"cannot convert {self.kind.label} value {self.value!r} to string")


def format_float(value: float, bits: int = 64) -> str:
    """
    Shortest decimal text that reads back to the same float, never using
    an exponent: 1.0 -> "1", 1e20 -> "100000000000000000000".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    if bits == 32:
        shortest = _shortest_float32(value)
    else:
        shortest = repr(float(value))

    text = format(Decimal(shortest), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _shortest_float32(value: float) -> str:
    target = _as_float32(value)
    for precision in range(1, 10):
        candidate = f"{target:.{precision}g}"
        if _as_float32(float(candidate)) == target:
            return candidate
    return repr(target)


def _as_float32(value: float) -> float:
    return struct.unpack(">f", struct.pack(">f", value))[0]
