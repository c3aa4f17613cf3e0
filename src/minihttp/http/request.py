"""
=============================================================================
HTTP REQUEST: ENCODING (CLIENT) AND REQUEST-LINE PARSING (SERVER)
=============================================================================

The whole request this project ever sends or accepts:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /docs/a.txt HTTP/1.1\\r\\n       <── request line                │
    │  Host: example.com\\r\\n              ┐                               │
    │  Connection: close\\r\\n              ┘ header block (never parsed)   │
    │  \\r\\n                               <── terminator                  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LINE RULES (SERVER SIDE)
=============================================================================

The raw line must contain EXACTLY two space characters, otherwise it is
malformed no matter what the tokens look like:

    "GET /a.txt HTTP/1.1\\r\\n"     2 spaces  ✓
    "GET  /a.txt HTTP/1.1\\r\\n"    3 spaces  ✗  400
    "GET /a b.txt HTTP/1.1\\r\\n"   3 spaces  ✗  400
    "GET /a.txt\\r\\n"              1 space   ✗  400

The version token keeps its line terminator: only ``"HTTP/1.1\\r\\n"`` is
accepted, so a request ending in a bare ``\\n`` is rejected too. Method
and version are checked by the caller (handlers/static.py), in the
order that decides which status code wins.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO

from ..errors import TransportError
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

HTTP_VERSION = "HTTP/1.1"

# Bytes on the wire are decoded losslessly so odd file names reach the
# file system exactly as the client sent them.
WIRE_ENCODING = "utf-8"
WIRE_ERRORS = "surrogateescape"


class HTTPParseError(Exception):
    """
    Raised when a request line is malformed.

    Carries the status code the server should answer with.
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class RequestLine:
    """
    A split request line.

    ``version`` is the raw remainder of the line, terminator included.
    """

    method: str
    target: str
    version: str

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @property
    def has_valid_version(self) -> bool:
        return self.version == HTTP_VERSION + "\r\n"

    def __str__(self) -> str:
        return f"{self.method} {self.target} {self.version.rstrip()}"


def parse_request_line(raw: bytes) -> RequestLine:
    """
    Split a raw request line into method, target and version.

    Args:
        raw: One line as read from the socket, terminator included.

    Returns:
        RequestLine with the three tokens.

    Raises:
        HTTPParseError: If the line does not contain exactly two spaces.
    """
    line = raw.decode(WIRE_ENCODING, errors=WIRE_ERRORS)

    spaces = line.count(" ")
    if spaces != 2:
        raise HTTPParseError(f"Invalid request line ({spaces} spaces): {line!r}")

    method, target, version = line.split(" ")
    return RequestLine(method=method, target=target, version=version)


def encode_request(host: str, request_path: str) -> bytes:
    """
    Build the complete GET request for ``host`` and ``request_path``.

        >>> encode_request("example.com", "a.txt")
        b'GET /a.txt HTTP/1.1\\r\\nHost: example.com\\r\\nConnection: close\\r\\n\\r\\n'
    """
    return (
        f"GET /{request_path} {HTTP_VERSION}\r\n"
        f"Host: {host}\r\n"
        f"Connection: close\r\n"
        f"\r\n"
    ).encode(WIRE_ENCODING, errors=WIRE_ERRORS)


def send_request(stream: BinaryIO, host: str, request_path: str) -> None:
    """
    Write the request and flush it immediately.

    Raises:
        TransportError: If the write or flush fails. There is no retry.
    """
    data = encode_request(host, request_path)
    try:
        stream.write(data)
        stream.flush()
    except OSError as e:
        raise TransportError("sending request failed", e) from e
    logger.debug(f"Sent request: GET /{request_path} (Host: {host})")
