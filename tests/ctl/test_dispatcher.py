import argparse
from unittest.mock import Mock

import pytest

from tikey.core.models.result import TableRow
from tikeyctl.core.dispatcher import CommandDispatcher


@pytest.fixture
def dispatcher():
    return CommandDispatcher()


def run(dispatcher, *arguments, **options):
    return dispatcher.dispatch(
        *arguments,
        client=Mock(),
        loader=Mock(),
        namespace=argparse.Namespace(**options),
    )


@pytest.mark.ut
def test_result_objects_are_turned_into_dicts(dispatcher):
    @dispatcher.command("row")
    def row(client, loader, namespace):
        return TableRow(table_id=1, row_id=2)

    @dispatcher.command("plain")
    def plain(client, loader, namespace):
        return {"ok": True}

    assert run(dispatcher, "row") == {"format": "table_row", "table_id": 1, "row_id": 2}
    assert run(dispatcher, "plain") == {"ok": True}


@pytest.mark.ut
def test_required_options_are_checked_before_the_handler(dispatcher):
    calls = []

    @dispatcher.command("decodetable", requires=("table", "payload"))
    def decode_table(client, loader, namespace):
        calls.append(namespace.table)
        return {}

    with pytest.raises(ValueError, match="^table, payload is required.$"):
        run(dispatcher, "decodetable", payload="")
    with pytest.raises(ValueError, match="^payload is required.$"):
        run(dispatcher, "decodetable", table="t1")
    assert calls == []

    assert run(dispatcher, "decodetable", table="t1", payload="AA==") == {}
    assert calls == ["t1"]


@pytest.mark.ut
def test_commands_are_keyed_by_their_full_path(dispatcher):
    dispatcher.command("config", "use-context")(lambda client, loader, namespace: {"cmd": "use"})

    assert run(dispatcher, "config", "use-context") == {"cmd": "use"}
    with pytest.raises(RuntimeError, match="Unknown 'config' Command"):
        run(dispatcher, "config")
