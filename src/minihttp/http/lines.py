"""
=============================================================================
LINE-ORIENTED STREAM HELPERS
=============================================================================

Both programs talk to the network through buffered binary file objects
(``socket.makefile("rb")`` / ``socket.makefile("wb")``), which gives us
``readline()`` and line iteration for free:

    ┌──────────────┐  readline()   ┌─────────────────────────────────────┐
    │ raw socket   │ ────────────► │ b"HTTP/1.1 200 OK\\r\\n"              │
    │ byte stream  │ ────────────► │ b"Date: ...\\r\\n"                    │
    │              │ ────────────► │ b"\\r\\n"          <── header end     │
    │              │ ────────────► │ b"<body line 1>\\n"                  │
    └──────────────┘               └─────────────────────────────────────┘

Every line is owned by the caller only until the next read. Nothing is
held back in a private buffer, so after ``drain_header_block`` returns
the very next read yields the first body byte.

=============================================================================
"""

import logging
from typing import BinaryIO, Iterator


logger = logging.getLogger(__name__)

CRLF = b"\r\n"


def read_line(stream: BinaryIO) -> bytes:
    """
    Read one line including its terminator.

    Returns ``b""`` at end of stream. There is no length limit: a peer
    that never sends a newline grows the line until it closes.
    """
    return stream.readline()


def iter_lines(stream: BinaryIO) -> Iterator[bytes]:
    """Yield lines from ``stream`` until end of stream."""
    while True:
        line = stream.readline()
        if not line:
            return
        yield line


def drain_header_block(stream: BinaryIO) -> int:
    """
    Consume header lines up to and including the bare CRLF terminator.

    Header contents are never interpreted. End of stream also ends the
    block, since there is nothing left to keep in sync.

    Returns:
        Number of lines consumed, terminator included.
    """
    consumed = 0
    for line in iter_lines(stream):
        consumed += 1
        if line == CRLF:
            break
    return consumed


def transfer_body(source: BinaryIO, destination: BinaryIO) -> int:
    """
    Copy ``source`` to ``destination`` line by line until end of stream.

    Lines are written unchanged, so arbitrary bytes survive the copy.
    The destination is flushed once at the end.

    Returns:
        Number of bytes written.
    """
    written = 0
    for line in iter_lines(source):
        destination.write(line)
        written += len(line)
    destination.flush()
    logger.debug(f"Transferred {written} bytes")
    return written
