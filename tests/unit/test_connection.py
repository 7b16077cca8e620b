"""
Unit tests for Connection line reading and closing.
"""

import socket
import threading
import time

import pytest

from webserver.core.connection import (
    DRAIN_TIMEOUT,
    Connection,
    ConnectionState,
    IncompleteRequestError,
)

from conftest import recv_all


@pytest.fixture
def pair():
    """(client socket, server-side Connection) over a socketpair."""
    client, server_side = socket.socketpair()
    conn = Connection(socket=server_side, address=("127.0.0.1", 40000))
    yield client, conn
    conn.close()
    client.close()


class TestReadRequestLine:
    """Tests for Connection.read_request_line()."""

    def test_returns_first_line(self, pair, sample_get_request: bytes):
        client, conn = pair
        client.sendall(sample_get_request)

        assert conn.read_request_line() == "GET /index.html HTTP/1.1"
        assert conn.state == ConnectionState.READING

    def test_bare_lf_terminators(self, pair):
        """LF-only line endings are accepted as well as CRLF."""
        client, conn = pair
        client.sendall(b"GET /a.html HTTP/1.0\nHost: x\n\n")

        assert conn.read_request_line() == "GET /a.html HTTP/1.0"

    def test_request_line_only(self, pair):
        client, conn = pair
        client.sendall(b"GET / HTTP/1.1\r\n\r\n")

        assert conn.read_request_line() == "GET / HTTP/1.1"

    def test_blank_first_line(self, pair):
        """A header block that is just the blank line yields an empty string."""
        client, conn = pair
        client.sendall(b"\r\n")

        assert conn.read_request_line() == ""

    def test_split_across_sends(self, pair):
        """Lines arriving in pieces are reassembled."""
        client, conn = pair
        for piece in (b"GE", b"T /in", b"dex.html HTTP/1.1\r", b"\nHost: a\r\n", b"\r\n"):
            client.sendall(piece)

        assert conn.read_request_line() == "GET /index.html HTTP/1.1"

    def test_stops_at_blank_line(self, pair):
        """Bytes after the blank line are left unread."""
        client, conn = pair
        client.sendall(b"GET / HTTP/1.1\r\n\r\nbody bytes")

        assert conn.read_request_line() == "GET / HTTP/1.1"
        assert conn._reader.read(10) == b"body bytes"

    def test_eof_before_blank_line(self, pair):
        client, conn = pair
        client.sendall(b"GET / HTTP/1.1\r\nHost: x\r\n")
        client.shutdown(socket.SHUT_WR)

        with pytest.raises(IncompleteRequestError) as exc_info:
            conn.read_request_line()

        assert "GET / HTTP/1.1" in str(exc_info.value)

    def test_eof_mid_line(self, pair):
        client, conn = pair
        client.sendall(b"GET / HT")
        client.shutdown(socket.SHUT_WR)

        with pytest.raises(IncompleteRequestError):
            conn.read_request_line()

    def test_eof_immediately(self, pair):
        client, conn = pair
        client.shutdown(socket.SHUT_WR)

        with pytest.raises(IncompleteRequestError):
            conn.read_request_line()

    def test_incomplete_request_is_connection_error(self):
        assert issubclass(IncompleteRequestError, ConnectionError)

    def test_non_ascii_bytes_decode(self, pair):
        client, conn = pair
        client.sendall(b"GET /caf\xe9.html HTTP/1.1\r\n\r\n")

        assert conn.read_request_line() == "GET /caf\xe9.html HTTP/1.1"


class TestWriteAndClose:
    """Tests for writing and closing."""

    def test_write_flush_close(self, pair):
        client, conn = pair
        conn.write(b"hello ")
        conn.writer.write(b"world")
        conn.flush()
        conn.close()

        assert recv_all(client) == b"hello world"
        assert conn.state == ConnectionState.CLOSED

    def test_close_flushes_buffered_bytes(self, pair):
        client, conn = pair
        conn.write(b"buffered")
        conn.close()

        assert recv_all(client) == b"buffered"

    def test_close_is_idempotent(self, pair):
        _, conn = pair
        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED

    def test_close_after_peer_gone(self, pair):
        """Closing never raises, even if the client vanished."""
        client, conn = pair
        client.close()
        conn.write(b"x" * 10)

        conn.close()

        assert conn.state == ConnectionState.CLOSED

    def test_context_manager_closes(self):
        client, server_side = socket.socketpair()
        with client:
            with Connection(socket=server_side, address=("127.0.0.1", 1)) as conn:
                conn.write(b"ok")

            assert conn.state == ConnectionState.CLOSED
            assert recv_all(client) == b"ok"

    def test_drain_is_bounded_for_chatty_client(self, pair):
        """A client that never stops sending cannot hold close() open."""
        client, conn = pair
        stop = threading.Event()

        def flood():
            client.settimeout(1.0)
            try:
                while not stop.is_set():
                    client.sendall(b"x" * 1024)
            except OSError:
                pass  # server side closed

        sender = threading.Thread(target=flood, daemon=True)
        sender.start()

        started = time.monotonic()
        conn.close()
        elapsed = time.monotonic() - started

        stop.set()
        sender.join(timeout=2.0)

        assert conn.state == ConnectionState.CLOSED
        assert elapsed < DRAIN_TIMEOUT + 1.0


class TestConnectionProperties:
    """Tests for convenience accessors."""

    def test_client_string(self, pair):
        _, conn = pair

        assert conn.client == "127.0.0.1:40000"

    def test_ids_are_unique(self):
        a_client, a_server = socket.socketpair()
        b_client, b_server = socket.socketpair()
        a = Connection(socket=a_server, address=("h", 1))
        b = Connection(socket=b_server, address=("h", 2))

        try:
            assert a.id != b.id
            assert len(a.id) == 8
        finally:
            for c in (a, b):
                c.close()
            a_client.close()
            b_client.close()
