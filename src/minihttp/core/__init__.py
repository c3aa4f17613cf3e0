"""
Transport layer: listening socket, accept loop and connection wrapper.
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = ["Connection", "ConnectionState", "SocketServer"]
