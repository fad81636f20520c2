import logging

import requests
from pydantic import ValidationError

from tikey.core.errors import SchemaLookupFailedError
from tikey.core.models.schema import TableInfo
from tikey.core.ports.schema import SchemaLookup
from tikeyctl.core.client import TikeyClient


class HttpSchemaLookup(SchemaLookup):
    """
    Fetches table metadata from the server's schema endpoint.

    A table reference is either ``<db>.<table>`` (GET /schema/<db>/<table>)
    or a numeric table id (GET /schema?table_id=<id>).
    """

    def __init__(self, client: TikeyClient) -> None:
        self._client = client
        self._logger = logging.getLogger("ctl.infra.schema")

    def lookup(self, table_ref: str) -> TableInfo:
        path, params = self.resolve(table_ref)

        try:
            resp = self._client.get(path, params=params)
        except requests.RequestException as ex:
            raise SchemaLookupFailedError(f"schema request failed: {ex}") from ex

        if resp.status_code != 200:
            raise SchemaLookupFailedError(
                f"get table info status code is not ok ({resp.status_code}). body: {resp.text}"
            )

        try:
            table = TableInfo.model_validate_json(resp.content)
        except ValidationError as ex:
            raise SchemaLookupFailedError(f"invalid table info for '{table_ref}': {ex}") from ex

        self._logger.debug(f"Table '{table_ref}' resolved to id {table.id} ({len(table.columns)} columns)")
        return table

    @staticmethod
    def resolve(table_ref: str) -> tuple[str, dict[str, str] | None]:
        if "." in table_ref:
            fields = table_ref.split(".")
            if len(fields) != 2 or not all(fields):
                raise SchemaLookupFailedError(f"wrong table name '{table_ref}'. need like: test.t1")
            db, table = fields
            return f"schema/{db}/{table}", None

        if not table_ref.isdigit():
            raise SchemaLookupFailedError(f"wrong table reference '{table_ref}'. need <db>.<table> or a table id")
        return "schema", {"table_id": table_ref}
