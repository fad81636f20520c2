import pytest

from tikey.core.codec.b64 import b64decode, inspect_base64
from tikey.core.errors import MalformedBase64Error


@pytest.mark.ut
def test_inspect_base64():
    assert inspect_base64("AAAAACqPhb0=") == {
        "format": "base64",
        "hex": "000000002a8f85bd",
        "uint64": 714048957,
    }


@pytest.mark.ut
def test_inspect_long_payload_has_no_integer():
    data = inspect_base64("AAECAwQFBgcI")
    assert data["hex"] == "000102030405060708"
    assert "uint64" not in data


@pytest.mark.ut
@pytest.mark.parametrize("text", ["ThisIsNotBase64", "AAA", "AA==x", "A A="])
def test_invalid_base64(text):
    with pytest.raises(MalformedBase64Error):
        b64decode(text)
