"""
=============================================================================
FETCH CLIENT
=============================================================================

Downloads one URL with a single GET request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         CLIENT FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "http://host/path"                                                │
    │        │  has_http_scheme()   no ──► InputError (no network used)   │
    │        │  parse_url()                                               │
    │        ▼                                                            │
    │   open_connection(host, port)         ──► TransportError            │
    │        │                                                            │
    │        ▼                                                            │
    │   send_request()                      GET /path HTTP/1.1 ...        │
    │        │                                                            │
    │        ▼                                                            │
    │   validate_response()                 ──► ProtocolError             │
    │        │                              ──► RejectedResponse          │
    │        ▼                                                            │
    │   open output (stdout / file / dir)   ──► LocalIOError              │
    │        │                                                            │
    │        ▼                                                            │
    │   transfer_body()                     until the server closes       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The output file is only created once the server has accepted the
request, so a 404 never leaves an empty file behind.

=============================================================================
"""

import logging
import os
import socket
import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from .config import ClientConfig, DEFAULT_INDEX
from .core.connection import Connection
from .errors import InputError, LocalIOError, TransportError
from .http.lines import transfer_body
from .http.request import send_request
from .http.response import validate_response
from .http.url import URL, has_http_scheme, parse_url


logger = logging.getLogger(__name__)


def open_connection(host: str, port: int, timeout: Optional[float] = None) -> Connection:
    """
    Resolve ``host`` and connect to it.

    Raises:
        TransportError: Name resolution or connect failed.
    """
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise TransportError(f"cannot connect to {host}:{port}", e) from e

    logger.debug(f"Connected to {host}:{port}")
    return Connection(socket=sock, address=sock.getpeername()[:2], timeout=timeout)


def output_filename(request_path: str) -> str:
    """
    File name used when saving into a directory.

        >>> output_filename("docs/a.txt")
        'a.txt'
        >>> output_filename("docs/")
        'index.html'
        >>> output_filename("search?q=1")
        'search'
    """
    for delimiter in "?#;":
        request_path = request_path.split(delimiter, 1)[0]
    return request_path.rsplit("/", 1)[-1] or DEFAULT_INDEX


class HTTPClient:
    """
    One-shot HTTP/1.1 GET client.

    Usage:
        client = HTTPClient(ClientConfig(port=8080, output_dir="/tmp"))
        client.fetch("http://localhost/docs/a.txt")
    """

    def __init__(self, config: Optional[ClientConfig] = None, stdout: Optional[BinaryIO] = None):
        self.config = config or ClientConfig()
        self.config.validate()
        self._stdout = stdout

    def output_path(self, url: URL) -> Optional[str]:
        """Where the body goes; None means stdout."""
        if self.config.output_file is not None:
            return self.config.output_file
        if self.config.output_dir is not None:
            return os.path.join(self.config.output_dir, output_filename(url.request_path))
        return None

    @contextmanager
    def _open_output(self, url: URL) -> Iterator[BinaryIO]:
        path = self.output_path(url)
        if path is None:
            yield self._stdout or sys.stdout.buffer
            return

        try:
            output = open(path, "wb")
        except OSError as e:
            raise LocalIOError(f"cannot create output file {path}: {e.strerror}") from e

        logger.debug(f"Writing body to {path}")
        with output:
            yield output

    def fetch(self, url: str) -> int:
        """
        Download ``url`` to the configured destination.

        Returns:
            Number of body bytes written.

        Raises:
            InputError: URL lacks the http:// prefix or has an empty host.
            TransportError: Connecting, sending or receiving failed.
            ProtocolError: The status line is malformed.
            RejectedResponse: The status code is not 200.
            LocalIOError: The output cannot be written.
        """
        if not has_http_scheme(url):
            raise InputError("url must start with http://")

        target = parse_url(url)

        with open_connection(target.host, self.config.port, self.config.timeout) as conn:
            send_request(conn.writer, target.host, target.request_path)

            try:
                status = validate_response(conn.reader)
            except OSError as e:
                raise TransportError("reading response failed", e) from e
            logger.info(f"{status.code} {status.reason} for {target.target}")

            with self._open_output(target) as output:
                try:
                    return transfer_body(conn.reader, output)
                except OSError as e:
                    raise TransportError("transfer failed", e) from e
