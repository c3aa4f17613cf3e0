"""
=============================================================================
CONFIGURATION
=============================================================================

Settings for the two programs, as dataclasses.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── minihttp-server -p 3000 ./public                           │
    │                                                                      │
    │   2. Environment variables (server only)                            │
    │      └── MINIHTTP_PORT=3000 minihttp-server ./public                │
    │                                                                      │
    │   3. Default values (in these dataclasses)                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both configs validate eagerly: a bad port or an unreadable document
root is reported before any socket is created.

=============================================================================
"""

import os
import socket
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InputError


DEFAULT_SERVER_PORT = 8080
DEFAULT_INDEX = "index.html"

WELL_KNOWN_PORTS = {"http": 80, "http-alt": 8080}


def resolve_port(value: Union[int, str]) -> int:
    """
    Turn a port number or service name into a port number.

        >>> resolve_port("8080")
        8080
        >>> resolve_port("http")
        80

    Raises:
        InputError: Unknown service name or out-of-range number.
    """
    # isdigit() alone also accepts "²" and other non-ASCII digits.
    if isinstance(value, str) and not (value.isascii() and value.isdigit()):
        try:
            return socket.getservbyname(value, "tcp")
        except (OSError, UnicodeError):
            # Minimal containers ship without /etc/services.
            if value in WELL_KNOWN_PORTS:
                return WELL_KNOWN_PORTS[value]
            raise InputError(f"unknown port or service: {value!r}") from None

    port = int(value)
    if not 0 <= port < 65536:
        raise InputError(f"Invalid port: {port}. Must be 0-65535.")
    return port


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    NETWORK
    - host, port, backlog, timeout

    CONTENT
    - document_root, index_filename

    LOGGING
    - log_level, log_format
    """

    document_root: str = "."
    """Directory every request target is resolved against."""

    index_filename: str = DEFAULT_INDEX
    """Served when a target ends in "/"."""

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces
    - "127.0.0.1" - Localhost only
    """

    port: int = DEFAULT_SERVER_PORT
    """The port number to listen on. 0 lets the OS pick one."""

    backlog: int = 5
    """
    Maximum number of queued connections.
    Only one connection is served at a time, so a short queue is enough.
    """

    timeout: Optional[float] = None
    """
    Socket timeout for accepted connections in seconds.
    None = blocking. A silent client then stalls the server.
    """

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'json' or 'text'."""

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """
        Create configuration from environment variables.

        MINIHTTP_HOST        Server host (default: 0.0.0.0)
        MINIHTTP_PORT        Server port or service name (default: 8080)
        MINIHTTP_DOC_ROOT    Document root (default: .)
        MINIHTTP_INDEX       Index filename (default: index.html)
        MINIHTTP_LOG_LEVEL   Logging level (default: INFO)
        MINIHTTP_LOG_FORMAT  text or json (default: text)

        Keyword arguments that are not None override the environment.
        """
        port = overrides.get("port")
        if port is None:
            port = resolve_port(os.getenv("MINIHTTP_PORT", str(DEFAULT_SERVER_PORT)))

        values = dict(
            host=os.getenv("MINIHTTP_HOST", "0.0.0.0"),
            port=port,
            document_root=os.getenv("MINIHTTP_DOC_ROOT", "."),
            index_filename=os.getenv("MINIHTTP_INDEX", DEFAULT_INDEX),
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("MINIHTTP_LOG_FORMAT", "text"),
        )
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            InputError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise InputError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.index_filename:
            raise InputError("index filename must not be empty")

        if self.backlog < 1:
            raise InputError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise InputError("timeout must be > 0")

        if self.log_format not in ("text", "json"):
            raise InputError(f"Invalid log format: {self.log_format}")

        try:
            os.scandir(self.document_root).close()
        except OSError as e:
            raise InputError(f"cannot open document root {self.document_root}: {e.strerror}") from e


@dataclass
class ClientConfig:
    """
    Configuration for the fetch client.

    At most one of ``output_file`` and ``output_dir`` may be set; with
    neither, the body goes to stdout.
    """

    port: int = 80
    output_file: Optional[str] = None
    output_dir: Optional[str] = None
    timeout: Optional[float] = None
    log_level: str = "WARNING"

    def validate(self) -> None:
        if not 0 < self.port < 65536:
            raise InputError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.output_file is not None and self.output_dir is not None:
            raise InputError("output file and output directory are mutually exclusive")

        if self.timeout is not None and self.timeout <= 0:
            raise InputError("timeout must be > 0")
