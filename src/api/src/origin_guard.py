"""
Builds the URL of an origin's traffic advice resource.

The checkup endpoint fetches on behalf of a browser and bypasses CORS, so
the set of URLs it is willing to request is kept deliberately narrow: only
http and https, only the default port, and only the well-known path.
"""
from urllib.parse import urlsplit
import httpx

from config import TRAFFIC_ADVICE_PATH

ALLOWED_SCHEMES = ("http", "https")
# Code points that can never appear in a domain
FORBIDDEN_HOST_CHARS = frozenset("\x00\t\n\r #%/:<>?@[\\]^|")


class InvalidOrigin(ValueError):
    pass


class InvalidURL(InvalidOrigin):
    pass


class UnsupportedScheme(InvalidOrigin):
    pass


class NonDefaultPort(InvalidOrigin):
    pass


def _normalize_host(hostname: str) -> str:
    # urlsplit has already lowercased the host and stripped IPv6 brackets
    if ":" in hostname:
        return f"[{hostname}]"
    if FORBIDDEN_HOST_CHARS.intersection(hostname):
        raise InvalidURL(f"invalid host: {hostname!r}")
    return hostname


def traffic_advice_url(origin: str) -> httpx.URL:
    """
    Resolve the traffic advice path against ``origin``.

    Anything after the authority (path, query, fragment) is dropped, exactly
    as resolving an absolute path against a base URL would.

    Raises ``InvalidURL`` if ``origin`` is not an absolute URL with a host,
    ``UnsupportedScheme`` for anything but http/https, and ``NonDefaultPort``
    if a port is written out at all, even the scheme's default one.
    """
    try:
        parts = urlsplit(origin.strip())
        port = parts.port
    except ValueError as error:
        raise InvalidURL(f"invalid URL: {origin!r}") from error

    if not parts.scheme:
        raise InvalidURL(f"invalid URL: {origin!r}")
    if parts.scheme not in ALLOWED_SCHEMES:
        raise UnsupportedScheme(f"invalid protocol: {parts.scheme}")
    if not parts.hostname:
        raise InvalidURL(f"missing host: {origin!r}")
    if parts.username is not None or parts.password is not None:
        raise InvalidURL("credentials are not permitted")
    if port is not None:
        raise NonDefaultPort("only default ports permitted")

    host = _normalize_host(parts.hostname)
    try:
        return httpx.URL(f"{parts.scheme}://{host}{TRAFFIC_ADVICE_PATH}")
    except httpx.InvalidURL as error:
        raise InvalidURL(f"invalid URL: {origin!r}") from error
