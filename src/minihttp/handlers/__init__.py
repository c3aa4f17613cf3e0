"""
Request handlers.

A handler reads one request from the connection and returns a
TransferOutcome; the server turns that outcome into bytes on the wire.

    StaticFileHandler   serve files below a document root
"""

from .static import StaticFileHandler, file_size, open_resolved, resolve_path

__all__ = ["StaticFileHandler", "file_size", "open_resolved", "resolve_path"]
