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

from staticserver import StaticFileServer, ServerConfig


INDEX_HTML = b"<!DOCTYPE html><html><body><h1>Home</h1></body></html>"
STYLE_CSS = b"body { color: #333; }"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for the index page."""
    return (
        b"GET / HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def doc_root(tmp_path: Path) -> Path:
    """A small document root with a few files of different types."""
    (tmp_path / "index.html").write_bytes(INDEX_HTML)
    (tmp_path / "style.css").write_bytes(STYLE_CSS)
    (tmp_path / "empty.txt").write_bytes(b"")
    (tmp_path / "my file.txt").write_bytes(b"spaces")
    (tmp_path / "LOGO.PNG").write_bytes(b"\x89PNG\r\n\x1a\n")
    (tmp_path / "data.bin").write_bytes(bytes(range(256)))
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.txt").write_bytes(b"read me")
    return tmp_path


@pytest.fixture
def config(doc_root: Path) -> ServerConfig:
    """Test configuration serving doc_root on an OS-assigned port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        timeout=1.0,
        document_root=str(doc_root),
        log_level="DEBUG",
    )


class FakeSocket:
    """
    Stand-in for a connected client socket.

    recv() hands out the queued items in order: bytes are returned,
    exceptions are raised. Once the queue is empty it returns b"", as a
    peer that has closed would.
    """

    def __init__(self, *incoming):
        self.incoming = list(incoming)
        self.sent = b""
        self.timeouts = []
        self.recv_sizes = []
        self.shutdown_calls = 0
        self.close_calls = 0

    def settimeout(self, value):
        self.timeouts.append(value)

    def recv(self, size):
        self.recv_sizes.append(size)
        if not self.incoming:
            return b""
        item = self.incoming.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def sendall(self, data):
        self.sent += data

    def shutdown(self, how):
        self.shutdown_calls += 1

    def close(self):
        self.close_calls += 1


@pytest.fixture
def fake_socket_factory():
    return FakeSocket


def parse_raw_response(raw: bytes):
    """Split raw response bytes into (status_line, headers list, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = [tuple(line.split(": ", 1)) for line in lines[1:]]
    return lines[0], headers, body


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read until it closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        if data:
            s.sendall(data)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def parse_response():
    return parse_raw_response


class ServerThread:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: StaticFileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.port, data)


@pytest.fixture
def running_server(config: ServerConfig) -> Generator[ServerThread, None, None]:
    """A StaticFileServer serving doc_root in a background thread."""
    srv = ServerThread(StaticFileServer(config))
    srv.start()

    yield srv

    srv.stop()
