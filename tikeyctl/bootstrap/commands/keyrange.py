import argparse

from tikey.core.codec.keyrange import KeyFormat, KeyRanges, global_ranges, table_ranges
from tikeyctl.bootstrap.deps import get_dispatcher
from tikeyctl.core.client import TikeyClient
from tikeyctl.core.loader import CtlConfLoader
from tikeyctl.infra.schema_lookup import HttpSchemaLookup

dispatcher = get_dispatcher()


@dispatcher.command("keyrange")
def key_ranges(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> KeyRanges:
    _ = loader
    key_format = KeyFormat(encode=bool(getattr(namespace, "encode", False)))
    database = getattr(namespace, "database", None)
    table = getattr(namespace, "table", None)

    if not database or not table:
        return KeyRanges(global_ranges(), key_format=key_format)

    info = HttpSchemaLookup(client).lookup(f"{database}.{table}")
    indexes = [(idx.id, idx.name.O) for idx in info.indexes]

    return KeyRanges(
        global_ranges(),
        table_name=table,
        table_ranges=table_ranges(info.id, indexes),
        key_format=key_format,
    )
