import string

from tikey.core.errors import MalformedEscapeDigitsError, UnterminatedEscapeError

BACKSLASH = 0x5C

# Single-character escapes and the byte each one stands for.
SIMPLE_ESCAPES: dict[int, int] = {
    ord("a"): 0x07,
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
    ord("v"): 0x0B,
    ord("\\"): ord("\\"),
    ord("'"): ord("'"),
    ord('"'): ord('"'),
}

HEX_DIGITS = frozenset(string.hexdigits.encode())
OCT_DIGITS = frozenset(string.octdigits.encode())


def decode_escaped(text: str | bytes) -> bytes:
    """
    Resolve C-style escapes in a textual key into raw bytes.

    Supported forms:
        \\xHH   two hex digits
        \\OOO   three octal digits
        \\a \\b \\f \\n \\r \\t \\v \\\\ \\' \\"

    The scan works on bytes, not characters: a ``str`` is first encoded as
    UTF-8 with ``surrogateescape`` so undecodable argv bytes come back
    unchanged. Bytes outside escape sequences are copied verbatim.
    """
    if isinstance(text, str):
        data = text.encode("utf-8", "surrogateescape")
    else:
        data = bytes(text)

    out = bytearray()
    pos = 0
    size = len(data)

    while pos < size:
        c = data[pos]
        pos += 1

        if c != BACKSLASH:
            out.append(c)
            continue

        if pos >= size:
            raise UnterminatedEscapeError("key ends with a lone backslash")

        e = data[pos]
        pos += 1

        if e in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[e])
            continue

        if e == ord("x"):
            digits = data[pos:pos + 2]
            pos += 2
            out.append(_parse_digits(digits, width=2, base=16, allowed=HEX_DIGITS))
        else:
            # the introducing byte is the first of three octal digits
            digits = data[pos - 1:pos + 2]
            pos += 2
            out.append(_parse_digits(digits, width=3, base=8, allowed=OCT_DIGITS))

    return bytes(out)


def _parse_digits(digits: bytes, width: int, base: int, allowed: frozenset[int]) -> int:
    if len(digits) < width:
        raise UnterminatedEscapeError(
            f"escape needs {width} digits, got {len(digits)}: {digits!r}"
        )

    if any(d not in allowed for d in digits):
        raise MalformedEscapeDigitsError(f"invalid escape digits {digits!r}")

    value = int(digits, base)
    if value > 0xFF:
        raise MalformedEscapeDigitsError(f"escape value out of range: {digits!r}")

    return value
