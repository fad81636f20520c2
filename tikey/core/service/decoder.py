import logging
from collections.abc import Callable
from dataclasses import dataclass

from tikey.core.codec.b64 import b64decode
from tikey.core.codec.escape import decode_escaped
from tikey.core.codec.keylayout import decode_index_values, parse_index_key, parse_row_key
from tikey.core.errors import TikeyError, UnrecognizedKeyFormatError
from tikey.core.models.result import BareValues, KeyResult

KeyStrategy = Callable[[str], KeyResult]


@dataclass(frozen=True, slots=True)
class DecodeAttempt:
    """Outcome of one decoding strategy: either a result or the error it hit."""
    strategy: str
    result: KeyResult | None = None
    error: TikeyError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def parse_table_key(raw: bytes) -> KeyResult:
    """Try the row layout, then the index layout."""
    try:
        return parse_row_key(raw)
    except UnrecognizedKeyFormatError:
        return parse_index_key(raw)


def decode_escaped_key(text: str) -> KeyResult:
    return parse_table_key(decode_escaped(text))


def decode_base64_key(text: str) -> KeyResult:
    return parse_table_key(b64decode(text))


def decode_bare_values(text: str) -> KeyResult:
    values = decode_index_values(b64decode(text))
    if not values:
        raise UnrecognizedKeyFormatError("no encoded value found in payload")
    return BareValues(values=values)


DEFAULT_STRATEGIES: tuple[tuple[str, KeyStrategy], ...] = (
    ("escaped", decode_escaped_key),
    ("base64", decode_base64_key),
    ("bare-values", decode_bare_values),
)


class KeyDecoder:
    """
    Decodes an operator-supplied key by trying an ordered list of
    strategies:

        escaped      C-style escaped key text  -> row/index key
        base64       base64 key                -> row/index key
        bare-values  base64 payload            -> list of encoded values

    The first strategy that succeeds wins. Failed attempts are logged and,
    when every strategy fails, attached as notes to the last error, which
    is raised.
    """

    def __init__(self, strategies: tuple[tuple[str, KeyStrategy], ...] = DEFAULT_STRATEGIES) -> None:
        self._strategies = strategies
        self._logger = logging.getLogger("core.service.decoder")

    def attempts(self, text: str):
        for name, strategy in self._strategies:
            try:
                yield DecodeAttempt(strategy=name, result=strategy(text))
            except TikeyError as ex:
                self._logger.debug(f"Strategy '{name}' failed: {ex}")
                yield DecodeAttempt(strategy=name, error=ex)

    def decode(self, text: str) -> KeyResult:
        failed: list[DecodeAttempt] = []

        for attempt in self.attempts(text):
            if attempt.ok:
                self._logger.debug(f"Key decoded by strategy '{attempt.strategy}'")
                return attempt.result
            failed.append(attempt)

        if not failed:
            raise UnrecognizedKeyFormatError("no decoding strategy configured")

        final = failed[-1].error
        for attempt in failed[:-1]:
            final.add_note(f"{attempt.strategy}: {attempt.error}")
        raise final
