from enum import IntEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class TypeCode(IntEnum):
    """MySQL column type codes as reported by the schema endpoint."""
    DECIMAL = 0
    TINY = 1
    SHORT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    NULL = 6
    TIMESTAMP = 7
    LONGLONG = 8
    INT24 = 9
    DATE = 10
    DURATION = 11
    DATETIME = 12
    YEAR = 13
    NEWDATE = 14
    VARCHAR = 15
    BIT = 16
    JSON = 0xF5
    NEWDECIMAL = 0xF6
    ENUM = 0xF7
    SET = 0xF8
    TINY_BLOB = 0xF9
    MEDIUM_BLOB = 0xFA
    LONG_BLOB = 0xFB
    BLOB = 0xFC
    VAR_STRING = 0xFD
    STRING = 0xFE
    GEOMETRY = 0xFF


UNSIGNED_FLAG = 1 << 5

INTEGER_TYPES = frozenset({
    TypeCode.TINY,
    TypeCode.SHORT,
    TypeCode.INT24,
    TypeCode.LONG,
    TypeCode.LONGLONG,
    TypeCode.YEAR,
})

STRING_TYPES = frozenset({
    TypeCode.VARCHAR,
    TypeCode.VAR_STRING,
    TypeCode.STRING,
})

BLOB_TYPES = frozenset({
    TypeCode.TINY_BLOB,
    TypeCode.MEDIUM_BLOB,
    TypeCode.LONG_BLOB,
    TypeCode.BLOB,
})

TIME_TYPES = frozenset({
    TypeCode.DATE,
    TypeCode.DATETIME,
    TypeCode.TIMESTAMP,
})


class FieldType(BaseModel):
    """
    Declared type of a column, in the shape the server serializes it:

        {"Tp": 3, "Flag": 0, "Flen": 11, "Decimal": 0,
         "Charset": "binary", "Collate": "binary", "Elems": null}
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tp: Annotated[int, Field(alias="Tp")]
    flag: Annotated[int, Field(alias="Flag", default=0)]
    flen: Annotated[int, Field(alias="Flen", default=-1)]
    decimal: Annotated[int, Field(alias="Decimal", default=0)]
    charset: Annotated[str, Field(alias="Charset", default="")]
    collate: Annotated[str, Field(alias="Collate", default="")]
    elems: Annotated[list[str] | None, Field(alias="Elems", default=None)]

    @property
    def unsigned(self) -> bool:
        return bool(self.flag & UNSIGNED_FLAG)

    @property
    def elements(self) -> list[str]:
        return list(self.elems or [])
