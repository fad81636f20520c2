import base64
import binascii
from typing import Any

from tikey.core.errors import MalformedBase64Error


def b64decode(text: str) -> bytes:
    """Strict standard base64: padding required, no foreign characters."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise MalformedBase64Error(f"illegal base64 data: {ex}") from ex


def inspect_base64(text: str) -> dict[str, Any]:
    """
    Describe a base64 value: its hex form and, for payloads of at most
    eight bytes, the big-endian unsigned integer it holds.
    """
    raw = b64decode(text)
    result: dict[str, Any] = {"format": "base64", "hex": raw.hex()}
    if 0 < len(raw) <= 8:
        result["uint64"] = int.from_bytes(raw, "big")
    return result
