from dataclasses import dataclass, field
from typing import Any

from tikey.core.codec.memcomparable import encode_bytes, encode_int

META_PREFIX = b"m"
META_END = b"n"
TABLE_PREFIX = b"t"
TABLE_END = b"u"
INDEX_SEP = b"_i"
RECORD_SEP = b"_r"


@dataclass(frozen=True, slots=True)
class KeyFormat:
    """
    How keys are printed. With ``encode`` set, keys are shown in their
    memcomparable form, the way they appear in the storage layer.
    """
    encode: bool = False

    def format(self, key: bytes) -> str:
        if self.encode:
            key = encode_bytes(key)
        return key.hex()


@dataclass(frozen=True, slots=True)
class KeyRange:
    name: str
    start: bytes
    end: bytes
    depth: int = 1

    def to_dict(self, fmt: KeyFormat) -> dict[str, Any]:
        return {
            "name": self.name,
            "start": fmt.format(self.start),
            "end": fmt.format(self.end),
            "depth": self.depth,
        }


@dataclass(frozen=True, slots=True)
class KeyRanges:
    global_ranges: list[KeyRange]
    table_name: str | None = None
    table_ranges: list[KeyRange] = field(default_factory=list)
    key_format: KeyFormat = KeyFormat()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "format": "key_ranges",
            "global": [r.to_dict(self.key_format) for r in self.global_ranges],
        }
        if self.table_name is not None:
            data["table"] = self.table_name
            data["table_ranges"] = [r.to_dict(self.key_format) for r in self.table_ranges]
        return data


def global_ranges() -> list[KeyRange]:
    return [
        KeyRange("meta", META_PREFIX, META_END),
        KeyRange("table", TABLE_PREFIX, TABLE_END),
    ]


def table_ranges(table_id: int, indexes: list[tuple[int, str]]) -> list[KeyRange]:
    """
    Key ranges of one table, in storage order:

        table          t{id}        .. t{id+1}
        table indexes  t{id}_i      .. t{id}_r
        index <name>   t{id}_i{iid} .. t{id}_i{iid+1}
        table rows     t{id}_r      .. t{id+1}
    """
    table_prefix = encode_int(TABLE_PREFIX, table_id)
    table_end = encode_int(TABLE_PREFIX, table_id + 1)
    index_prefix = table_prefix + INDEX_SEP
    row_prefix = table_prefix + RECORD_SEP

    ranges = [
        KeyRange("table", table_prefix, table_end),
        KeyRange("table indexes", index_prefix, row_prefix),
    ]
    for index_id, name in indexes:
        ranges.append(
            KeyRange(
                f"index {name}",
                encode_int(index_prefix, index_id),
                encode_int(index_prefix, index_id + 1),
                depth=2,
            )
        )
    ranges.append(KeyRange("table rows", row_prefix, table_end))
    return ranges
