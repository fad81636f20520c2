class TikeyError(Exception):
    """Base exception for every codec and lookup failure."""


class UnterminatedEscapeError(TikeyError):
    """The key text ends inside an escape sequence."""


class MalformedEscapeDigitsError(TikeyError):
    """The digits of a hex/octal escape do not form a byte."""


class InvalidEncodedValueError(TikeyError):
    """Unknown flag byte or truncated payload in an encoded value."""


class UnrecognizedKeyFormatError(TikeyError):
    """The buffer matches none of the known table key layouts."""


class EmptyPayloadError(TikeyError):
    """An empty row payload was supplied."""


class NoRowDataError(TikeyError):
    """The payload deserializes to no row at all."""


class SchemaLookupFailedError(TikeyError):
    """The schema collaborator could not resolve a table."""


class MalformedBase64Error(TikeyError):
    """The payload is not valid standard base64."""
