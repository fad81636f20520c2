import sys

from tikey.core.helpers.utils import scan
from tikeyctl.bootstrap.deps import get_cli


@scan("tikeyctl.bootstrap.commands")
def main():
    cli = get_cli()

    try:
        if cli.interactive:
            cli.cmdloop()
        else:
            cli.onecmd(cli.args.namespace)
    finally:
        cli.close()

    if not cli.interactive and cli.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
