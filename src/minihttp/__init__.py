"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.1 GET Client and File Server
=============================================================================

Two small programs sharing one wire protocol:

    client                                   server
    ──────                                   ──────
    GET /a.txt HTTP/1.1\\r\\n          ───►    parse request line
    Host: example.com\\r\\n                    resolve against DOC_ROOT
    Connection: close\\r\\n                    open file
    \\r\\n
                                     ◄───    HTTP/1.1 200 OK\\r\\n
    validate status line                     Date: ...\\r\\n
    skip headers                             Content-Length: N\\r\\n
    copy body until close                    Connection: close\\r\\n
                                             \\r\\n
                                             <file bytes>

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry points (client, server)
    ├── client.py            # HTTPClient
    ├── server.py            # HTTPServer
    ├── config.py            # ServerConfig, ClientConfig
    ├── errors.py            # exception hierarchy and exit codes
    ├── logs.py              # logging setup and access log
    ├── core/                # transport
    │   ├── socket_server.py # listening socket and accept loop
    │   └── connection.py    # buffered streams over a socket
    ├── http/                # protocol
    │   ├── url.py           # URL resolver
    │   ├── request.py       # request encoder, request-line parser
    │   ├── response.py      # response validator and encoder
    │   ├── lines.py         # header draining, body transfer
    │   └── status_codes.py  # HTTPStatus
    └── handlers/
        └── static.py        # path resolver and request validator

=============================================================================
"""

__version__ = "1.0.0"

from .client import HTTPClient
from .config import ClientConfig, ServerConfig
from .server import HTTPServer

__all__ = ["HTTPClient", "HTTPServer", "ClientConfig", "ServerConfig", "__version__"]
