from functools import lru_cache

from tikey.core.service.decoder import KeyDecoder
from tikey.core.service.row import RowValueDecoder
from tikeyctl.core.cmd import TikeyCmd
from tikeyctl.core.dispatcher import CommandDispatcher
from tikeyctl.infra.format_renderer import RENDERERS


@lru_cache
def get_dispatcher() -> CommandDispatcher:
    return CommandDispatcher()


@lru_cache
def get_key_decoder() -> KeyDecoder:
    return KeyDecoder()


@lru_cache
def get_row_decoder() -> RowValueDecoder:
    return RowValueDecoder()


@lru_cache
def get_cli() -> TikeyCmd:
    return TikeyCmd(get_dispatcher(), RENDERERS)
