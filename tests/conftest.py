"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig


INDEX_BODY = b"<html><body>root index</body></html>\n"
TEXT_BODY = b"line one\nline two\r\nno newline at end"
DIR_INDEX_BODY = b"<html><body>dir index</body></html>\n"


@pytest.fixture
def doc_root(tmp_path: Path) -> Path:
    """
    Document root with:

        index.html
        a.txt
        dir/index.html
        empty/          (no index file)
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_BODY)
    (root / "a.txt").write_bytes(TEXT_BODY)
    (root / "dir").mkdir()
    (root / "dir" / "index.html").write_bytes(DIR_INDEX_BODY)
    (root / "empty").mkdir()
    return root


@pytest.fixture
def sample_response() -> bytes:
    """A complete 200 response with a two-line body."""
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Date: Sun, 18 Oct 2026 10:00:00 GMT\r\n"
        b"Content-Length: 12\r\n"
        b"Connection: close\r\n"
        b"\r\n"
        b"first\nsecond"
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self.error = None
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def _run(self):
        try:
            self.server.run()
        except Exception as e:
            self.error = e

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self, timeout: float = 5.0):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def raw_exchange(self, request: bytes) -> bytes:
        """Send raw bytes, half-close, and return everything the server answers."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(request)
            s.shutdown(socket.SHUT_WR)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(doc_root: Path) -> Generator[TestServer, None, None]:
    """A running server on an OS-assigned port, serving ``doc_root``."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        document_root=str(doc_root),
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
