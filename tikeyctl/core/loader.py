import logging
import os
from pathlib import Path

import yaml

from tikeyctl.core.model import CtlConf


class CtlConfLoader:
    """
    Reads and writes tikeyconf.yaml, the file holding the named server
    contexts and the one currently in use.

    The first of these that is set wins, and ``source`` records which:

        --tikeyconf   path given on the command line
        TIKEYCONF     environment variable
        default       ~/.tikey/tikeyconf.yaml

    A missing file is only an error for ``load``; read-only commands use
    ``load_or_default`` and run against the built-in local context.
    """

    DEFAULT_PATH = "~/.tikey/tikeyconf.yaml"
    ENV_VAR = "TIKEYCONF"

    def __init__(self, cli_path: str | None = None):
        self._logger = logging.getLogger("ctl.loader")
        self.path, self.source = self._resolve(cli_path)

    def _resolve(self, cli_path: str | None) -> tuple[Path, str]:
        if cli_path:
            return Path(cli_path).expanduser(), "--tikeyconf"

        env_path = os.environ.get(self.ENV_VAR)
        if env_path:
            return Path(env_path).expanduser(), self.ENV_VAR

        return Path(self.DEFAULT_PATH).expanduser(), "default"

    def load(self) -> CtlConf:
        if not self.path.exists():
            raise FileNotFoundError(f"tikeyconf not found: {self.path} (from {self.source})")

        self._logger.debug(f"Loading tikeyconf from {self.path} ({self.source})")
        try:
            return CtlConf.from_dict(yaml.safe_load(self.path.read_text()))
        except yaml.YAMLError as ex:
            raise SystemExit(f"tikeyconf is not valid yaml: {self.path.absolute()} ({ex})")
        except (KeyError, TypeError, ValueError, AttributeError) as ex:
            raise SystemExit(f"tikeyconf format is invalid: {self.path.absolute()} ({ex})")

    def load_or_default(self) -> CtlConf:
        if not self.path.exists():
            self._logger.debug(f"No tikeyconf at {self.path}, using the default context")
            return CtlConf.default()
        return self.load()

    def save(self, conf: CtlConf) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(conf.to_dict(), sort_keys=False))
        self._logger.debug(f"Saved tikeyconf to {self.path}")
