import argparse
from typing import Any

from tikeyctl.bootstrap.deps import get_dispatcher
from tikeyctl.core.client import TikeyClient
from tikeyctl.core.loader import CtlConfLoader

dispatcher = get_dispatcher()


@dispatcher.command("config", "current-context")
def cmd_current_context(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> dict[str, Any]:
    _ = client, namespace
    conf = loader.load_or_default()
    return {"current_context": conf.current_context}


@dispatcher.command("config", "get-contexts")
def cmd_get_contexts(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> dict[str, Any]:
    _ = client, namespace
    conf = loader.load_or_default()
    return {
        "contexts": [
            f"{name} ({ctx.server})" for name, ctx in conf.contexts.items()
        ]
    }


@dispatcher.command("config", "use-context", requires=("name",))
def cmd_use_context(
    client: TikeyClient,
    loader: CtlConfLoader,
    namespace: argparse.Namespace
) -> dict[str, Any]:
    _ = client
    conf = loader.load()

    if namespace.name not in conf.contexts:
        raise ValueError(f"Context '{namespace.name}' does not exist")

    conf.current_context = namespace.name
    loader.save(conf)

    return {"current_context": conf.current_context}
