import argparse
import cmd
import logging
import shlex

from tikey.core.helpers.utils import setup_logging
from tikeyctl.core.client import TikeyClient
from tikeyctl.core.dispatcher import CommandDispatcher
from tikeyctl.core.loader import CtlConfLoader
from tikeyctl.core.ports.render import Renderer
from tikeyctl.core.utils import parse_timeout, resolve_context


class TikeyCmd(cmd.Cmd):
    intro = "Entering tikeyctl interactive mode. Type 'exit' or 'quit' to leave."
    prompt = "tikeyctl> "

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        renderers: dict[str, type[Renderer]],
        argv: list[str] | None = None,
    ) -> None:
        super().__init__()

        self._dispatcher = dispatcher
        self._argparser = self._argparse(list(renderers))
        self._args = self._argparser.parse_args(argv)
        setup_logging(self._args.log_level)

        self._logger = logging.getLogger("ctl.cmd")
        self._renderer = renderers[self._args.output]()
        self._loader = CtlConfLoader(self._args.tikeyconf)
        self._client: TikeyClient = self._get_client()
        self.failed = False

    @property
    def args(self) -> argparse.Namespace:
        return self._args

    @property
    def interactive(self) -> bool:
        return self._args.namespace is None

    def close(self):
        self._client.close()

    def handle(self, *arguments: str, **overrides) -> None:
        namespace = argparse.Namespace(**{**vars(self.args), **overrides})
        try:
            data = self._dispatcher.dispatch(
                *arguments,
                client=self._client,
                loader=self._loader,
                namespace=namespace
            )
            print(self._renderer.render(data))
        except Exception as ex:
            self._logger.debug(f"Command '{' '.join(arguments)}' failed", exc_info=ex)
            self.failed = True
            print(str(ex))
            for note in getattr(ex, "__notes__", ()):
                print(f"  {note}")

    def do_decoder(self, line):
        # Escaped keys are taken verbatim: shell-style splitting would eat backslashes.
        key = line.strip() or getattr(self.args, "key", None)
        if not key:
            print("Usage: decoder <key>")
            return

        self.handle("decoder", key=key)

    def do_base64decode(self, line):
        values = line.split() if line else getattr(self.args, "values", None)
        if not values or len(values) > 2:
            print(
                "Usage: base64decode <base64>\n"
                "       base64decode <db.table|table_id> <base64>"
            )
            return

        if len(values) == 1:
            self.handle("base64decode", value=values[0])
        else:
            self.handle("decodetable", table=values[0], payload=values[1])

    def do_decodetable(self, line):
        argv = line.split() if line else [
            getattr(self.args, "table", None),
            getattr(self.args, "payload", None),
        ]
        if len(argv) != 2 or not all(argv):
            print("Usage: decodetable <db.table|table_id> <base64>")
            return

        table, payload = argv
        self.handle("decodetable", table=table, payload=payload)

    def do_keyrange(self, line):
        if self.interactive:
            try:
                parsed = self._argparser.parse_args(["keyrange", *shlex.split(line)])
            except SystemExit:
                return
            overrides = {
                "encode": parsed.encode,
                "database": parsed.database,
                "table": parsed.table,
            }
        else:
            overrides = {}

        self.handle("keyrange", **overrides)

    def do_config(self, line):
        if self.interactive:
            print("config command is not support in interactive mode.")
            self._argparser.print_usage()
            return

        config_cmd = getattr(self.args, "config_cmd", None)
        if config_cmd is None:
            print(
                "Usage: config [argument <current-context|get-contexts|use-context>]\n"
                "config argument is required."
            )
            return

        self.handle("config", config_cmd)

    def do_exit(self, arg):
        return True

    def do_quit(self, arg):
        return True

    def do_EOF(self, arg):
        print()
        return True

    def _get_client(self) -> TikeyClient:
        conf = self._loader.load_or_default()
        ctx_name, ctx = resolve_context(
            conf,
            self._args.context,
            self._args.host,
            self._args.port,
        )

        client = TikeyClient(ctx.host, ctx.port, parse_timeout(ctx.timeout))
        self.prompt = f"tikeyctl({ctx_name or ctx.server})# "
        self._logger.debug(f"Using context '{ctx_name}' -> {client.base_url}")
        return client

    @staticmethod
    def _argparse(formats: list[str]) -> argparse.ArgumentParser:
        global_opts = argparse.ArgumentParser(prog="tikeyctl")
        global_opts.add_argument("--tikeyconf")
        global_opts.add_argument("--context")
        global_opts.add_argument("--host")
        global_opts.add_argument("--port", type=int)
        global_opts.add_argument("--output", "-o", choices=formats, default="text")
        global_opts.add_argument("--log-level", default="WARNING")

        sub = global_opts.add_subparsers(dest="namespace")

        cfg = sub.add_parser("config")
        cfg_sub = cfg.add_subparsers(dest="config_cmd", required=True)
        cfg_sub.add_parser("current-context")
        cfg_sub.add_parser("get-contexts")
        use_ctx = cfg_sub.add_parser("use-context")
        use_ctx.add_argument("name")

        decoder = sub.add_parser("decoder", help="decode a row or index key")
        decoder.add_argument("key")

        b64 = sub.add_parser("base64decode", help="inspect a base64 value or decode a row value")
        b64.add_argument("values", nargs="+", metavar="arg")

        decode_table = sub.add_parser("decodetable", help="decode a base64 row value")
        decode_table.add_argument("table", help="<db>.<table> or table id")
        decode_table.add_argument("payload")

        keyrange = sub.add_parser("keyrange", help="show key ranges")
        keyrange.add_argument("-e", "--encode", action="store_true", help="print keys memcomparable-encoded")
        keyrange.add_argument("-d", "--database")
        keyrange.add_argument("-t", "--table")

        return global_opts
