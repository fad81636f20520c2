from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from tikey.core.codec.memcomparable import decode_bytes, decode_int, decode_one
from tikey.core.errors import InvalidEncodedValueError, UnrecognizedKeyFormatError
from tikey.core.models.result import IndexValue, TableIndex, TableRow

TABLE_PREFIX = ord("t")
KEY_SEP = ord("_")
ID_LEN = 8

TABLE_ID_OFFSET = 1
HANDLE_OFFSET = TABLE_ID_OFFSET + ID_LEN + 2
INDEX_VALUES_OFFSET = HANDLE_OFFSET + ID_LEN


class KeyKind(StrEnum):
    ROW = "r"
    INDEX = "i"


def _identity(buf: bytes) -> bytes:
    return buf


def _unpad(buf: bytes) -> bytes:
    try:
        value, _ = decode_bytes(buf, partial=True)
    except InvalidEncodedValueError as ex:
        raise UnrecognizedKeyFormatError(f"invalid padded key: {ex}") from ex
    return value


@dataclass(frozen=True, slots=True)
class KeyLayout:
    """
    One generation of the table key layout.

    ``sep_offset`` is where the ``_r``/``_i`` separator sits in the stored
    bytes, ``normalize`` turns a matching buffer into the compact form

        t | table_id:8 | _ | r/i | handle_or_index_id:8 | [index values]

    A padded key only needs its first two groups intact: a trailing group
    cut short is kept as is, so 22 bytes are enough to read a row key.
    """
    name: str
    min_len: int
    sep_offset: int
    normalize: Callable[[bytes], bytes]

    def matches(self, buf: bytes, kind: KeyKind) -> bool:
        return (
            len(buf) >= self.min_len
            and buf[0] == TABLE_PREFIX
            and buf[self.sep_offset] == KEY_SEP
            and buf[self.sep_offset + 1] == ord(kind.value)
        )


COMPACT = KeyLayout(name="compact", min_len=19, sep_offset=9, normalize=_identity)
PADDED = KeyLayout(name="padded", min_len=22, sep_offset=10, normalize=_unpad)

# Detection order matters: the compact signature is checked first.
LAYOUTS: tuple[KeyLayout, ...] = (COMPACT, PADDED)


def detect_layout(buf: bytes, kind: KeyKind) -> KeyLayout | None:
    for layout in LAYOUTS:
        if layout.matches(buf, kind):
            return layout
    return None


def _compact_key(buf: bytes, kind: KeyKind) -> bytes:
    layout = detect_layout(buf, kind)
    if layout is None:
        raise UnrecognizedKeyFormatError(
            f"illegal code format: not a table {kind.name.lower()} key"
        )

    compact = layout.normalize(bytes(buf))
    if not COMPACT.matches(compact, kind):
        raise UnrecognizedKeyFormatError(
            f"illegal code format: {layout.name} key does not unpad to a table key"
        )
    return compact


def _decode_ids(compact: bytes) -> tuple[int, int]:
    table_id, _ = decode_int(compact[TABLE_ID_OFFSET:TABLE_ID_OFFSET + ID_LEN])
    handle, _ = decode_int(compact[HANDLE_OFFSET:HANDLE_OFFSET + ID_LEN])
    return table_id, handle


def parse_row_key(buf: bytes) -> TableRow:
    """Parse a ``t{table_id}_r{row_id}`` key in either generation."""
    compact = _compact_key(buf, KeyKind.ROW)
    table_id, row_id = _decode_ids(compact)
    return TableRow(table_id=table_id, row_id=row_id)


def parse_index_key(buf: bytes) -> TableIndex:
    """Parse a ``t{table_id}_i{index_id}{values...}`` key in either generation."""
    compact = _compact_key(buf, KeyKind.INDEX)
    table_id, index_id = _decode_ids(compact)
    values = decode_index_values(compact[INDEX_VALUES_OFFSET:])
    return TableIndex(table_id=table_id, index_id=index_id, values=values)


def decode_index_values(buf: bytes) -> list[IndexValue]:
    """
    Decode encoded values one after another until nothing more can be
    consumed. A value that fails to decode ends the list; it is not an error.
    """
    values: list[IndexValue] = []
    rest = bytes(buf)

    while rest:
        try:
            datum, rest = decode_one(rest)
        except InvalidEncodedValueError:
            break
        values.append(IndexValue.from_datum(datum))

    return values
