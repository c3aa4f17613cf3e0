"""
=============================================================================
URL RESOLVER
=============================================================================

Splits an ``http://`` URL into the two pieces the request line needs.

    http://example.com/docs/a.txt?x=1
    ─┬───── ─────┬───── ────────┬────
     │           │              │
   scheme       host      request_path  ("docs/a.txt?x=1")

The host ends at the FIRST of these characters:

    ;  /  ?  :  @  =  &

That character is dropped and everything after it is the request path.
The request line puts the slash back: ``GET /<request_path> HTTP/1.1``.

Nothing is normalised: no percent-decoding, no collapsing of ``//``,
no port parsing. ``http://host:8080/x`` therefore yields the request
path ``8080/x``; use the ``-p`` option to pick a port.

=============================================================================
"""

from dataclasses import dataclass

from ..errors import InputError


HTTP_SCHEME = "http://"

# Characters that terminate the host part of a URL.
HOST_DELIMITERS = ";/?:@=&"


@dataclass(frozen=True)
class URL:
    """A decomposed ``http://`` URL."""

    host: str
    request_path: str = ""

    @property
    def target(self) -> str:
        """The request target as it appears on the wire."""
        return "/" + self.request_path


def has_http_scheme(url: str) -> bool:
    """Check for the literal ``http://`` prefix (case sensitive)."""
    return url.startswith(HTTP_SCHEME)


def parse_url(url: str) -> URL:
    """
    Decompose a URL that is known to start with ``http://``.

    Args:
        url: The full URL, prefix included.

    Returns:
        URL with ``host`` and ``request_path`` (no leading slash).

    Raises:
        InputError: If the host part is empty.
    """
    remainder = url[len(HTTP_SCHEME):]

    for index, char in enumerate(remainder):
        if char in HOST_DELIMITERS:
            host, request_path = remainder[:index], remainder[index + 1:]
            break
    else:
        host, request_path = remainder, ""

    if not host:
        raise InputError(f"malformed URL (empty host): {url}")

    return URL(host=host, request_path=request_path)
