"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns one incoming request into a TransferOutcome: either an open file
ready to stream, or the status code to answer with.

=============================================================================
PATH RESOLUTION
=============================================================================

The document root and the request target are glued together verbatim.
If the result ends in "/" the index filename is appended:

    root="/srv"  target="/"         ──►  /srv/index.html
    root="/srv"  target="/a.txt"    ──►  /srv/a.txt
    root="/srv"  target="/dir/"     ──►  /srv/dir/index.html
    root="/srv"  target="/dir"      ──►  /srv/dir          (404, a directory)

KNOWN WEAKNESS: ".." segments are NOT rejected. A target such as
"/../etc/passwd" resolves to "/srv/../etc/passwd" and is served if the
process can read it. Run the server with a document root and user that
make this acceptable.

=============================================================================
DECISION ORDER
=============================================================================

    read request line ── nothing read ──────────────────────────► 400
         │
    exactly 2 spaces? ── no ──► drain headers ──────────────────► 400
         │
    method == GET?    ── no ──► drain headers ──────────────────► 501
         │
    target opens?     ── no ──► drain headers ──────────────────► 404
         │
    "HTTP/1.1\\r\\n"?   ── no ──► drain headers, close file ──────► 400
         │
    drain headers, measure file size ───────────────────────────► 200

The header block is drained before every answer that follows a read
request line, so the client is never mid-send when we reply.

=============================================================================
"""

import io
import logging
import os
from typing import BinaryIO, Optional

from ..errors import LocalIOError
from ..http.lines import drain_header_block, read_line
from ..http.request import RequestLine, HTTPParseError, parse_request_line
from ..http.response import TransferOutcome
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


def resolve_path(document_root: str, target: str, index_filename: str) -> str:
    """
    Map a request target onto the file system.

    Pure string concatenation; nothing is normalised.
    """
    path = document_root + target
    if not path or path.endswith("/"):
        path += index_filename
    return path


def open_resolved(path: str) -> Optional[BinaryIO]:
    """
    Open ``path`` for binary reading.

    Returns None when the path is not a regular file or cannot be opened
    for any reason. All of these become a 404.
    """
    # Opening a FIFO or device would block the single server thread.
    if not os.path.isfile(path):
        return None
    try:
        return open(path, "rb")
    except OSError as e:
        logger.debug(f"Cannot open {path}: {e}")
        return None


def file_size(file: BinaryIO) -> int:
    """
    Size of an open file, leaving it positioned at offset 0.

    Raises:
        LocalIOError: If seeking fails.
    """
    try:
        size = file.seek(0, io.SEEK_END)
        file.seek(0, io.SEEK_SET)
    except OSError as e:
        raise LocalIOError(f"seek failed on {getattr(file, 'name', file)}: {e}") from e
    return size


class StaticFileHandler:
    """
    Serves files below a document root.

    Usage:
        handler = StaticFileHandler("/srv/www")
        outcome = handler.handle(conn.reader)
        # outcome.status, outcome.file, outcome.size

    The document root and index filename are fixed for the lifetime of
    the handler.
    """

    def __init__(self, document_root: str, index_filename: str = "index.html"):
        self.document_root = document_root
        self.index_filename = index_filename

        # Last request line seen, for the access log.
        self.last_request: Optional[RequestLine] = None

    def resolve(self, target: str) -> str:
        """Resolve ``target`` against this handler's document root."""
        return resolve_path(self.document_root, target, self.index_filename)

    def handle(self, stream: BinaryIO) -> TransferOutcome:
        """
        Read one request from ``stream`` and decide the outcome.

        Raises:
            LocalIOError: The target opened but its size could not be
                determined. Fatal to the server.
        """
        self.last_request = None

        raw = read_line(stream)
        if not raw:
            logger.debug("No request line received")
            return TransferOutcome.error(HTTPStatus.BAD_REQUEST)

        try:
            request = parse_request_line(raw)
        except HTTPParseError as e:
            logger.debug(str(e))
            drain_header_block(stream)
            return TransferOutcome.error(HTTPStatus(e.status_code))

        self.last_request = request

        if not request.is_get:
            drain_header_block(stream)
            return TransferOutcome.error(HTTPStatus.NOT_IMPLEMENTED)

        path = self.resolve(request.target)
        file = open_resolved(path)
        if file is None:
            drain_header_block(stream)
            return TransferOutcome.error(HTTPStatus.NOT_FOUND)

        if not request.has_valid_version:
            drain_header_block(stream)
            file.close()
            return TransferOutcome.error(HTTPStatus.BAD_REQUEST)

        drain_header_block(stream)
        try:
            size = file_size(file)
        except LocalIOError:
            file.close()
            raise

        logger.debug(f"Resolved {request.target} -> {path} ({size} bytes)")
        return TransferOutcome.success(file, size)
