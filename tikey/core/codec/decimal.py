from decimal import Decimal

from tikey.core.errors import InvalidEncodedValueError

DIGITS_PER_WORD = 9
WORD_SIZE = 4
DIG2BYTES = (0, 1, 1, 2, 2, 3, 3, 4, 4, 4)
MAX_PRECISION = 65


def bin_size(precision: int, frac: int) -> int:
    """Size in bytes of the binary form of a DECIMAL(precision, frac)."""
    digits_int = precision - frac
    words_int, lead = divmod(digits_int, DIGITS_PER_WORD)
    words_frac, trail = divmod(frac, DIGITS_PER_WORD)
    return (
        words_int * WORD_SIZE + DIG2BYTES[lead]
        + words_frac * WORD_SIZE + DIG2BYTES[trail]
    )


def decode_decimal(buf: bytes) -> tuple[Decimal, int, int, bytes]:
    """
    Decode ``precision:1 | frac:1 | bin`` and return
    (value, precision, frac, rest).

    ``bin`` is the MySQL binary decimal: integer and fraction digits are
    packed nine per 4-byte big-endian word, with leading/trailing partial
    words sized by DIG2BYTES. Negative values have every byte inverted, and
    the top bit of the first byte is flipped so that positive numbers sort
    after negative ones.
    """
    if len(buf) < 2:
        raise InvalidEncodedValueError("insufficient bytes to decode decimal header")

    precision, frac = buf[0], buf[1]
    if precision == 0 or precision > MAX_PRECISION or frac > precision:
        raise InvalidEncodedValueError(
            f"invalid decimal precision/frac: {precision}/{frac}"
        )

    size = bin_size(precision, frac)
    data = bytearray(buf[2:2 + size])
    if len(data) < size:
        raise InvalidEncodedValueError("insufficient bytes to decode decimal")

    negative = not data[0] & 0x80
    data[0] ^= 0x80
    if negative:
        data = bytearray(b ^ 0xFF for b in data)

    words_int, lead = divmod(precision - frac, DIGITS_PER_WORD)
    words_frac, trail = divmod(frac, DIGITS_PER_WORD)

    pos = 0

    def take(digits: int) -> int:
        nonlocal pos
        width = DIG2BYTES[digits]
        word = int.from_bytes(data[pos:pos + width], "big")
        pos += width
        if word >= 10 ** digits:
            raise InvalidEncodedValueError(f"invalid decimal word {word}")
        return word

    int_part = ""
    if lead:
        int_part += str(take(lead))
    for _ in range(words_int):
        int_part += f"{take(DIGITS_PER_WORD):09d}"

    frac_part = ""
    for _ in range(words_frac):
        frac_part += f"{take(DIGITS_PER_WORD):09d}"
    if trail:
        frac_part += f"{take(trail):0{trail}d}"

    int_part = int_part.lstrip("0") or "0"
    text = int_part + ("." + frac_part if frac_part else "")

    value = Decimal(text)
    if negative and value != 0:
        value = value.copy_negate()

    return value, precision, frac, bytes(buf[2 + size:])
