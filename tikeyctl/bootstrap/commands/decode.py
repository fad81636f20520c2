import argparse
from typing import Any

from tikey.core.codec.b64 import inspect_base64
from tikey.core.models.result import DecodedRow, KeyResult
from tikey.core.service.row import TableRowDecoder
from tikeyctl.bootstrap.deps import get_dispatcher, get_key_decoder, get_row_decoder
from tikeyctl.core.client import TikeyClient
from tikeyctl.core.loader import CtlConfLoader
from tikeyctl.infra.schema_lookup import HttpSchemaLookup

dispatcher = get_dispatcher()


@dispatcher.command("decoder", requires=("key",))
def decode_key(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> KeyResult:
    _ = client, loader
    return get_key_decoder().decode(namespace.key)


@dispatcher.command("base64decode", requires=("value",))
def base64_inspect(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> dict[str, Any]:
    _ = client, loader
    return inspect_base64(namespace.value)


@dispatcher.command("decodetable", requires=("table",))
def decode_table_row(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> DecodedRow:
    _ = loader
    decoder = TableRowDecoder(HttpSchemaLookup(client), get_row_decoder())
    return decoder.decode(namespace.table, getattr(namespace, "payload", None) or "")
