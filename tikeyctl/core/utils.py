from tikeyctl.core.model import ContextConfig, CtlConf, DEFAULT_SERVER


def parse_timeout(s: str) -> float:
    # Very simple parser: supports "<number>s" or "<number>ms"
    s = s.strip().lower()
    if s.endswith("ms"):
        return float(s[:-2]) / 1000.0
    if s.endswith("s"):
        return float(s[:-1])
    return float(s)


def resolve_context(
    conf: CtlConf,
    context_override: str | None,
    host_override: str | None = None,
    port_override: int | None = None,
) -> tuple[str, ContextConfig]:
    ctx_name = context_override or conf.current_context
    if ctx_name not in conf.contexts:
        print(f"Warning: unknown context '{ctx_name}', using fallback context.")
        ctx_name, ctx = "", ContextConfig(server=DEFAULT_SERVER)
    else:
        ctx = conf.contexts[ctx_name]

    if host_override or port_override:
        host = host_override or ctx.host
        port = port_override or ctx.port
        # shallow copy
        ctx = ContextConfig(server=f"{host}:{port}", timeout=ctx.timeout)

    return ctx_name, ctx
