"""
=============================================================================
FILE SERVER
=============================================================================

Glues the transport, the static file handler and the response encoder
together.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      PER-CONNECTION FLOW                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                             │
    │        │                                                            │
    │        ▼                                                            │
    │   StaticFileHandler.handle(conn.reader)  ──►  TransferOutcome       │
    │        │                                                            │
    │        ▼                                                            │
    │   send_head(conn.writer, outcome)        status line (+ headers)    │
    │        │                                                            │
    │        ▼  (200 only)                                                │
    │   transfer_body(outcome.file, conn.writer)                          │
    │        │                                                            │
    │        ▼                                                            │
    │   close file, close connection, write access log                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT STOPS THE SERVER
=============================================================================

    - the shutdown token (SIGINT/SIGTERM, or shutdown() from a thread)
    - LocalIOError: the server cannot size a file it opened
    - TransportError on the LISTENING socket

A client that hangs up early, sends garbage or asks for a missing file
only affects its own connection.

=============================================================================
"""

import logging
import threading
import time
from typing import Optional

from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .handlers.static import StaticFileHandler
from .http.lines import transfer_body
from .http.response import TransferOutcome, send_head
from .logs import log_request


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-threaded HTTP/1.1 file server.

    Usage:
        server = HTTPServer(ServerConfig(document_root="./public", port=8080))
        server.run()  # Blocks until SIGINT/SIGTERM

    From another thread:
        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None,
                 shutdown_event: Optional[threading.Event] = None):
        """
        Args:
            config: Server configuration. Validated immediately.
            shutdown_event: Optional cancellation token shared with the
                accept loop.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config, shutdown_event)
        self._handler = StaticFileHandler(
            self.config.document_root,
            self.config.index_filename,
        )
        self.requests_served = 0

    @property
    def address(self):
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def run(self):
        """
        Serve connections until shut down.

        Raises:
            TransportError: The listening socket failed.
            LocalIOError: A local resource failed while serving.
        """
        logger.info(
            f"Serving {self.config.document_root} "
            f"(index: {self.config.index_filename}) "
            f"on {self.config.host}:{self.config.port}"
        )
        self._socket_server.start(self.handle_connection)
        logger.info(f"Server stopped after {self.requests_served} connections")

    def shutdown(self):
        self._socket_server.shutdown()

    def handle_connection(self, conn: Connection):
        """
        Serve exactly one request on ``conn`` and close it.

        Socket errors are logged and swallowed here so the accept loop
        moves on. LocalIOError propagates and stops the server.
        """
        outcome: Optional[TransferOutcome] = None
        sent = 0

        with conn:
            try:
                outcome = self._handler.handle(conn.reader)
                send_head(conn.writer, outcome)
                if outcome.is_success:
                    sent = transfer_body(outcome.file, conn.writer)
            except OSError as e:
                logger.warning(f"[{conn.id}] Connection error with {conn.client_ip}: {e}")
            finally:
                if outcome is not None:
                    outcome.close()

        self.requests_served += 1

        request_line = self._handler.last_request
        log_request(
            client_ip=conn.client_ip,
            request_line=str(request_line) if request_line else None,
            status_code=int(outcome.status) if outcome else 0,
            content_length=sent,
            started_at=conn.created_at,
            log_format=self.config.log_format,
        )
