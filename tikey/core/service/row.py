import logging

from tikey.core.codec import rowcodec
from tikey.core.codec.b64 import b64decode
from tikey.core.errors import EmptyPayloadError, NoRowDataError
from tikey.core.models.result import ColumnOutcome, DecodedRow, FieldStatus
from tikey.core.models.schema import ColumnSchema
from tikey.core.ports.schema import SchemaLookup


class RowValueDecoder:
    """
    Decodes a base64 row value against the columns of its table.

    Every schema column yields exactly one outcome, in declared order:

        not found   the payload has no value for the column (for instance
                    a column added after the row was written)
        null        the stored value is NULL
        value       the rendered value
        error       the value decoded but could not be rendered; the error
                    text and a dump of the decoded datum are kept

    One column failing to render never stops the others.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger("core.service.row")

    def decode(self, payload: str, columns: list[ColumnSchema]) -> DecodedRow:
        if not payload:
            raise EmptyPayloadError("no data: empty row payload")

        raw = b64decode(payload)
        types = {col.column_id: col.field_type for col in columns}

        row = rowcodec.decode_row(raw, types)
        if row is None:
            raise NoRowDataError("no data: payload does not hold a row")

        outcomes = []
        for col in columns:
            datum = row.get(col.column_id)

            if datum is None:
                outcomes.append(
                    ColumnOutcome(col.column_id, col.name, FieldStatus.NOT_FOUND)
                )
                continue

            if datum.is_null:
                outcomes.append(
                    ColumnOutcome(col.column_id, col.name, FieldStatus.NULL)
                )
                continue

            try:
                text = datum.to_string()
            except ValueError as ex:
                self._logger.debug(f"Column '{col.name}' cannot be rendered: {ex}")
                outcomes.append(
                    ColumnOutcome(
                        col.column_id,
                        col.name,
                        FieldStatus.ERROR,
                        text=repr(datum),
                        error=str(ex),
                    )
                )
                continue

            outcomes.append(
                ColumnOutcome(col.column_id, col.name, FieldStatus.VALUE, text=text)
            )

        return DecodedRow(columns=outcomes)


class TableRowDecoder:
    """Resolves the table schema through a SchemaLookup, then decodes the row."""

    def __init__(self, schema_lookup: SchemaLookup, decoder: RowValueDecoder | None = None) -> None:
        self._schema_lookup = schema_lookup
        self._decoder = decoder or RowValueDecoder()

    def decode(self, table_ref: str, payload: str) -> DecodedRow:
        table = self._schema_lookup.lookup(table_ref)
        return self._decoder.decode(payload, table.column_schemas())
