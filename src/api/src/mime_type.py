"""
Just enough of the WHATWG MIME type parser to get at a type's essence.

Parameters are skipped entirely; a malformed parameter never makes the
whole value unparsable, only a bad type or subtype does.
"""
from typing import NamedTuple, Optional
import string

HTTP_WHITESPACE = " \t\r\n"
TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~" + string.ascii_letters + string.digits)


class MimeType(NamedTuple):
    type: str
    subtype: str

    @property
    def essence(self) -> str:
        return f"{self.type}/{self.subtype}"


def _is_token(value: str) -> bool:
    return bool(value) and all(char in TOKEN_CHARS for char in value)


def parse_mime_type(value: Optional[str]) -> Optional[MimeType]:
    """Parse a Content-Type value, returning None if it isn't a MIME type."""
    if value is None:
        return None

    value = value.strip(HTTP_WHITESPACE)
    type_, slash, rest = value.partition("/")
    if not slash or not _is_token(type_):
        return None

    subtype = rest.partition(";")[0].rstrip(HTTP_WHITESPACE)
    if not _is_token(subtype):
        return None

    return MimeType(type_.lower(), subtype.lower())


def essence_of(value: Optional[str]) -> Optional[str]:
    mime_type = parse_mime_type(value)
    return mime_type.essence if mime_type else None
