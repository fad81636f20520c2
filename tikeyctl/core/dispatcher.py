import argparse
import functools
import logging
from typing import Any, Protocol

from tikeyctl.core.client import TikeyClient
from tikeyctl.core.loader import CtlConfLoader


class Report(Protocol):
    def to_dict(self) -> dict[str, Any]:
        ...


class CommandHandler(Protocol):
    def __call__(
        self,
        client: TikeyClient,
        loader: CtlConfLoader,
        namespace: argparse.Namespace,
    ) -> Report | dict[str, Any]:
        ...


class CommandDispatcher:
    """
    Routes a command path such as ``("config", "use-context")`` to its
    handler.

    Handlers declare the namespace attributes they cannot run without;
    a missing or empty one is reported before the handler is called.
    A handler may return a plain dict or any decoded result exposing
    ``to_dict``; callers always receive the dict.
    """

    def __init__(self) -> None:
        self._commands: dict[tuple[str, ...], CommandHandler] = {}
        self._logger = logging.getLogger("ctl.dispatcher")

    def dispatch(
        self,
        *arguments: str,
        client: TikeyClient,
        loader: CtlConfLoader,
        namespace: argparse.Namespace
    ) -> dict[str, Any]:
        command = self._commands.get(arguments)
        if command is None:
            raise RuntimeError(f"Unknown '{' '.join(arguments)}' Command")

        self._logger.debug(f"Dispatching '{' '.join(arguments)}'")
        result = command(client, loader, namespace)
        return result if isinstance(result, dict) else result.to_dict()

    def command(self, *arguments: str, requires: tuple[str, ...] = ()):
        def decorator(func: CommandHandler):

            @functools.wraps(func)
            def wrapper(
                client: TikeyClient,
                loader: CtlConfLoader,
                namespace: argparse.Namespace,
            ) -> Report | dict[str, Any]:
                missing = [name for name in requires if not getattr(namespace, name, None)]
                if missing:
                    raise ValueError(f"{', '.join(missing)} is required.")
                return func(client, loader, namespace)

            self._commands[arguments] = wrapper

            return wrapper

        return decorator
