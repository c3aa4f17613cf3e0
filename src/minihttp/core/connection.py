"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps a connected TCP socket with the buffered binary streams the
protocol code works on.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

    Client sends:
        send("GET /a.txt HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n")

    Server might receive:
        recv() → "GET /a.t"
        recv() → "xt HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n"

Instead of buffering by hand we let ``socket.makefile()`` do it. Its
``readline()`` keeps calling recv() until it has a whole line:

    ┌──────────────┐        ┌──────────────────────┐        ┌────────────┐
    │   socket     │ ─────► │ reader (BufferedRW)  │ ─────► │ readline() │
    └──────────────┘        └──────────────────────┘        └────────────┘
           ▲                ┌──────────────────────┐        ┌────────────┐
           └─────────────── │ writer (BufferedW)   │ ◄───── │ write()    │
                            └──────────────────────┘        └────────────┘

The reader and writer hold references to the socket. The socket is only
really closed once both streams AND the socket object are closed, so
close() always closes all three.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Lifecycle of a connection.

        NEW ──► READING ──► WRITING ──► CLOSING ──► CLOSED
    """

    NEW = "new"
    READING = "reading"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    One TCP connection, used by both the client and the server.

    Attributes:
        socket: The connected socket.
        address: Peer's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted/opened.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    _reader: Optional[BinaryIO] = field(default=None, repr=False)
    _writer: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # None = fully blocking, the accepted socket does not inherit the
        # listening socket's poll timeout.
        self.socket.settimeout(self.timeout)
        self._reader = self.socket.makefile("rb")
        self._writer = self.socket.makefile("wb")

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary stream for reading lines from the peer."""
        self.state = ConnectionState.READING
        return self._reader

    @property
    def writer(self) -> BinaryIO:
        """Buffered binary stream for writing to the peer."""
        self.state = ConnectionState.WRITING
        return self._writer

    def close(self):
        """
        Close the connection.

        1. flush and close the writer
        2. shutdown(SHUT_WR): send FIN so the peer sees end of stream
        3. close the reader and the socket
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self._writer.close()
        except OSError as e:
            logger.debug(f"[{self.id}] Flush on close failed: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        self._reader.close()
        self.socket.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
