"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Listens for connections and hands them, one at a time, to a callback.

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create a socket file descriptor
    2. bind()      Associate the socket with an IP:PORT
    3. listen()    OS starts queueing incoming connections
    4. accept()    BLOCKS until a client connects, returns a NEW socket
    5. close()     Release the listening socket

=============================================================================
ONE CONNECTION AT A TIME
=============================================================================

The callback runs on the accept loop's own thread. The next accept()
only happens after the callback returns:

    accept ──► handle conn 1 ──► accept ──► handle conn 2 ──► ...

Clients that connect meanwhile wait in the kernel's backlog queue.

=============================================================================
SHUTDOWN
=============================================================================

The loop owns a ``threading.Event`` shutdown token. Anything may set it:

    SIGINT / SIGTERM handler ──┐
    another thread ────────────┼──► shutdown_event.set()
    SocketServer.shutdown() ───┘

The loop only READS the token, between accept() calls. accept() uses a
one second poll timeout so a token set from another thread is noticed
even when no client ever connects. A connection accepted after the
token was set is closed without being served.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from ..errors import TransportError
from .connection import Connection


logger = logging.getLogger(__name__)

ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig, shutdown_event: Optional[threading.Event] = None):
        """
        Args:
            config: Server configuration (host, port, backlog, timeout).
            shutdown_event: Cancellation token. A fresh one is created if
                not given.
        """
        self.config = config
        self.shutdown_event = shutdown_event or threading.Event()

        self._socket: Optional[socket.socket] = None
        self._original_handlers: dict = {}
        self._ready = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._socket is not None and not self.shutdown_event.is_set()

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound address. With port 0 this is the port the OS picked,
        once the server is listening.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready.wait(timeout)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without "Address already in use" while
        # the previous socket sits in TIME_WAIT.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Poll timeout so the loop can look at the shutdown token.
        sock.settimeout(ACCEPT_POLL_INTERVAL)

        return sock

    def _setup_signals(self):
        """
        Route SIGINT and SIGTERM to the shutdown token.

        Python only allows signal handlers on the main thread. When the
        server runs elsewhere (tests, embedding) the caller sets the
        token instead.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown_event.set()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until the shutdown token is set.

        Raises:
            TransportError: If the socket cannot be set up or accept()
                fails for a reason other than shutdown.
        """
        try:
            self._socket = self._create_socket()
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to listen on {self.config.host}:{self.config.port}: {e}")
            self._cleanup()
            raise TransportError(f"cannot listen on {self.config.host}:{self.config.port}", e) from e

        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while not self.shutdown_event.is_set():
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.shutdown_event.is_set():
                    break
                raise TransportError("accept failed", e) from e

            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
            )

            if self.shutdown_event.is_set():
                logger.info(f"[{conn.id}] Shutting down, dropping connection from {conn.client_ip}")
                conn.close()
                break

            logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}:{conn.client_port}")
            connection_handler(conn)

    def shutdown(self):
        """
        Ask the accept loop to stop. Safe to call from any thread, any
        number of times.
        """
        logger.info("Shutting down socket server...")
        self.shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            self._socket.close()
            self._socket = None

        self._ready.clear()
        logger.info("Socket server stopped")
