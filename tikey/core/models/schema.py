from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from tikey.core.models.fieldtype import FieldType


class CIStr(BaseModel):
    """Case-insensitive name: original spelling and lower-cased form."""
    model_config = ConfigDict(frozen=True)

    O: str
    L: str = ""

    @property
    def lower(self) -> str:
        return self.L or self.O.lower()


class ColumnInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: CIStr
    offset: Annotated[int, Field(default=0)]
    field_type: Annotated[FieldType, Field(alias="type")]


class IndexInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: Annotated[CIStr, Field(alias="idx_name")]


class TableInfo(BaseModel):
    """
    Table definition returned by the server's schema endpoint.

    Only the attributes needed for decoding are modelled; everything else
    in the payload is ignored.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: CIStr
    columns: Annotated[list[ColumnInfo], Field(alias="cols", default_factory=list)]
    indexes: Annotated[list[IndexInfo], Field(alias="index_info", default_factory=list)]

    def column_schemas(self) -> list["ColumnSchema"]:
        return [
            ColumnSchema(
                column_id=col.id,
                name=col.name.lower,
                field_type=col.field_type,
            )
            for col in self.columns
        ]


@dataclass(frozen=True, slots=True)
class ColumnSchema:
    column_id: int
    name: str
    field_type: FieldType
