"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webserver import WebServer, ServerConfig
from webserver.core import Connection
from webserver.handlers import RequestHandler


# Bytes that would be damaged by text decoding or template substitution
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n"
    b"\x00\x00\x00\rIHDR\xff\xfe\r\n"
    b"<cs371date><cs371server>\n"
    b"\x80\x81\x82 trailing"
)

GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\xff\xff\xff\x00\x00\x00;"

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00<cs371date>\xff\xd9"

HTML_TEMPLATE = (
    b"<h1>Hello</h1>\n"
    b"Today is <cs371date>, served by <cs371server>.\n"
    b"no markers here\r\n"
    b"last line without newline"
)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request with headers."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """A document root with one file of each content type."""
    root = tmp_path / "www"
    root.mkdir()

    (root / "index.html").write_bytes(HTML_TEMPLATE)
    (root / "plain.html").write_bytes(b"<p>plain</p>\n")
    (root / "notes.txt").write_bytes(b"just text <cs371server>\n")
    (root / "logo.png").write_bytes(PNG_BYTES)
    (root / "anim.gif").write_bytes(GIF_BYTES)
    (root / "photo.jpg").write_bytes(JPEG_BYTES)
    (root / "photo.jpeg").write_bytes(JPEG_BYTES)
    (root / "UPPER.PNG").write_bytes(PNG_BYTES)
    (root / "sub").mkdir()
    (root / "sub" / "page.html").write_bytes(b"<p>in sub</p>\n")

    return root


@pytest.fixture
def config(docroot: Path) -> ServerConfig:
    """Test configuration serving the temporary document root."""
    return ServerConfig(
        host="127.0.0.1",
        port=8080,
        document_root=str(docroot),
        server_name="TestServer/1.0",
        template_server_name="Test Server",
        log_level="DEBUG",
    )


@pytest.fixture
def handler(config: ServerConfig) -> RequestHandler:
    return RequestHandler(config)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def recv_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> tuple[str, dict, bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


class SocketPairExchange:
    """
    Runs a RequestHandler over a socketpair.

    The handler runs in its own thread, as it would in the server, while
    the test plays the client on the other end.
    """

    def __init__(self, handler: RequestHandler):
        self.handler = handler

    def __call__(self, raw_request: bytes, half_close: bool = False) -> bytes:
        client, server_side = socket.socketpair()
        conn = Connection(socket=server_side, address=("127.0.0.1", 50000))

        worker = threading.Thread(target=self.handler.handle, args=(conn,), daemon=True)
        worker.start()

        with client:
            client.sendall(raw_request)
            if half_close:
                client.shutdown(socket.SHUT_WR)
            response = recv_all(client)

        worker.join(timeout=5.0)
        assert not worker.is_alive(), "handler did not return"
        return response


@pytest.fixture
def exchange(handler: RequestHandler) -> SocketPairExchange:
    """Send raw request bytes through the handler, get raw response bytes."""
    return SocketPairExchange(handler)


class RunningServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None
        self.result: Optional[bool] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def _run(self):
        self.result = self.server.run()

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        if not self.server.socket_server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, raw: bytes) -> bytes:
        """Open a connection, send raw bytes, read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            return recv_all(s)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def running_server(config: ServerConfig, free_port: int) -> Generator[RunningServer, None, None]:
    """A real server listening on a free localhost port."""
    config.port = free_port
    test_srv = RunningServer(WebServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
