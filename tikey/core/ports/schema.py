from typing import Protocol

from tikey.core.models.schema import TableInfo


class SchemaLookup(Protocol):
    """
    Resolves a table reference to its definition.

    ``table_ref`` is either ``"database.table"`` or a numeric table id.
    Implementations raise SchemaLookupFailedError when the table cannot be
    resolved, whatever the underlying cause.
    """

    def lookup(self, table_ref: str) -> TableInfo:
        """Return the definition of the referenced table."""
