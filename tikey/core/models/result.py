from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from tikey.core.models.datum import Datum, Kind


@dataclass(frozen=True, slots=True)
class IndexValue:
    kind: Kind
    text: str

    @classmethod
    def from_datum(cls, datum: Datum) -> "IndexValue":
        return cls(kind=datum.kind, text=datum.to_string())

    @property
    def type_name(self) -> str:
        return self.kind.label

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "value": self.text}


@dataclass(frozen=True, slots=True)
class TableRow:
    table_id: int
    row_id: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": "table_row",
            "table_id": self.table_id,
            "row_id": self.row_id,
        }


@dataclass(frozen=True, slots=True)
class TableIndex:
    table_id: int
    index_id: int
    values: list[IndexValue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": "table_index",
            "table_id": self.table_id,
            "index_id": self.index_id,
            "index_values": [v.to_dict() for v in self.values],
        }


@dataclass(frozen=True, slots=True)
class BareValues:
    values: list[IndexValue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": "index_value",
            "index_values": [v.to_dict() for v in self.values],
        }


KeyResult = TableRow | TableIndex | BareValues


class FieldStatus(StrEnum):
    VALUE = "value"
    NULL = "null"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ColumnOutcome:
    """
    Decoding outcome of one schema column.

    ``text`` is the rendered value for VALUE, and a debug dump of the
    decoded datum for ERROR; ``error`` carries the conversion error text.
    """
    column_id: int
    name: str
    status: FieldStatus
    text: str = ""
    error: str | None = None

    @property
    def is_null(self) -> bool:
        return self.status == FieldStatus.NULL

    @property
    def found(self) -> bool:
        return self.status != FieldStatus.NOT_FOUND

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "column_id": self.column_id,
            "name": self.name,
            "status": str(self.status),
        }
        if self.status in (FieldStatus.VALUE, FieldStatus.ERROR):
            data["value"] = self.text
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True, slots=True)
class DecodedRow:
    columns: list[ColumnOutcome] = field(default_factory=list)

    @property
    def present(self) -> dict[int, ColumnOutcome]:
        """Outcomes of the columns the payload actually carries."""
        return {col.column_id: col for col in self.columns if col.found}

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": "table_row_value",
            "columns": [col.to_dict() for col in self.columns],
        }
