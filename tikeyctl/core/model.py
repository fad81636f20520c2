from dataclasses import dataclass, field

DEFAULT_CONTEXT = "default"
DEFAULT_SERVER = "127.0.0.1:10080"
DEFAULT_TIMEOUT = "5s"


@dataclass
class ContextConfig:
    server: str = DEFAULT_SERVER
    timeout: str = DEFAULT_TIMEOUT

    @property
    def host(self) -> str:
        return self.server.rsplit(":", 1)[0]

    @property
    def port(self) -> int:
        return int(self.server.rsplit(":", 1)[1])


@dataclass
class CtlConf:
    current_context: str
    contexts: dict[str, ContextConfig] = field(default_factory=dict)

    @staticmethod
    def default() -> "CtlConf":
        return CtlConf(
            current_context=DEFAULT_CONTEXT,
            contexts={DEFAULT_CONTEXT: ContextConfig()},
        )

    @staticmethod
    def from_dict(data: dict) -> "CtlConf":
        contexts = {}
        for name, ctx in data.get("contexts", {}).items():
            server = ctx["server"]
            host, _, port = server.rpartition(":")
            if not host or not port.isdigit():
                raise ValueError(f"context '{name}': server must be host:port, got {server!r}")

            contexts[name] = ContextConfig(
                server=server,
                timeout=str(ctx.get("timeout", DEFAULT_TIMEOUT)),
            )
        return CtlConf(
            current_context=data["current-context"],
            contexts=contexts,
        )

    def to_dict(self) -> dict:
        return {
            "current-context": self.current_context,
            "contexts": {
                name: {
                    "server": ctx.server,
                    "timeout": ctx.timeout,
                }
                for name, ctx in self.contexts.items()
            },
        }
