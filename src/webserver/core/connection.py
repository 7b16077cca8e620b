"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket as a duplex byte stream: a buffered
reader for the request and a buffered writer for the response.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

TCP does not preserve message boundaries. A request line may arrive split
across several recv() calls, or glued to the headers that follow it:

    First recv():  "GET /ind"
    Second recv(): "ex.html HTTP/1.1\r\nHost: lo"
    Third recv():  "calhost\r\n\r\n"

socket.makefile("rb") gives us a buffered reader whose readline() keeps
calling recv() until it has a full line. That is all the framing this
server needs, since it only cares about lines up to the first blank one.

=============================================================================
BLOCKING READS, NO TIMEOUT
=============================================================================

The socket is put in blocking mode with no timeout. readline() waits as
long as the client takes; there is no polling loop and no sleep. A silent
client ties up the one thread that owns this connection and nothing else.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)

# Upper bound on the whole post-response drain, not per recv().
DRAIN_TIMEOUT = 0.5


class IncompleteRequestError(ConnectionError):
    """The stream ended before the blank line that closes the header block."""


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"              # Just accepted, haven't read anything yet
    READING = "reading"      # Reading the request line and headers
    WRITING = "writing"      # Sending response data
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    One client connection, owned by exactly one request handler.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. LINE READING                                                     │
    │     └── read_request_line(): first line kept, headers discarded     │
    │                                                                      │
    │  2. BUFFERED WRITING                                                 │
    │     └── writer: file-like object the response writer streams into   │
    │                                                                      │
    │  3. GRACEFUL CLOSE                                                   │
    │     └── flush, shutdown(SHUT_WR), drain, close                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Buffered file objects over the socket (created in __post_init__)
    _reader: Optional[BinaryIO] = field(default=None, init=False, repr=False)
    _writer: Optional[BinaryIO] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        # Blocking mode, no timeout. Accepted sockets can inherit a timeout
        # from the listening socket on some platforms, so set it explicitly.
        self.socket.setblocking(True)

        self._reader = self.socket.makefile("rb")
        self._writer = self.socket.makefile("wb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client(self) -> str:
        """Client address as "ip:port", for log lines."""
        return f"{self.address[0]}:{self.address[1]}"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def writer(self) -> BinaryIO:
        """Writable binary stream for the response."""
        return self._writer

    # =========================================================================
    # READING
    # =========================================================================

    def read_request_line(self) -> str:
        """
        Read the request header block and return its first line.

        ┌─────────────────────────────────────────────────────────────────┐
        │                  read_request_line() Flow                        │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   loop:                                                          │
        │       readline()         ← blocks until "\n" or EOF             │
        │       EOF?               → IncompleteRequestError               │
        │       strip CRLF / LF                                           │
        │       empty?             → done                                 │
        │       first line?        → keep it                              │
        │       otherwise          → discard (header line)                │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Lines are decoded as ISO-8859-1, which maps every byte to one
        character and cannot fail.

        Returns:
            The first line of the request without its terminator. An
            empty string if the very first line was blank.

        Raises:
            IncompleteRequestError: If the stream ends before a blank line.
            OSError: If the socket errors while reading.
        """
        self.state = ConnectionState.READING
        request_line: Optional[str] = None

        while True:
            raw = self._reader.readline()

            # readline() returns b"" on EOF, or a partial line without "\n"
            # if the client closed mid-line.
            if not raw.endswith(b"\n"):
                raise IncompleteRequestError(
                    f"Connection closed before end of request headers "
                    f"(request line: {request_line!r}, pending: {raw!r})"
                )

            line = raw.rstrip(b"\r\n").decode("iso-8859-1")

            if not line:
                break

            if request_line is None:
                logger.debug(f"[{self.id}] Request line: ({line})")
                request_line = line
            else:
                logger.debug(f"[{self.id}] Header line: ({line})")

        return request_line or ""

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> None:
        """Write raw bytes to the response stream (buffered)."""
        self.state = ConnectionState.WRITING
        self._writer.write(data)

    def flush(self) -> None:
        """Push buffered response bytes to the socket."""
        self._writer.flush()

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. Flush and close the writer (any buffered response bytes go out)
        2. shutdown(SHUT_WR): tell the client we're done sending (FIN)
        3. Drain whatever the client still has in flight, for at most
           DRAIN_TIMEOUT seconds in total
        4. Close the reader and the socket

        Safe to call more than once. Errors are logged, not raised: the
        client may already be gone.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self._writer.close()
        except OSError as e:
            logger.debug(f"[{self.id}] Flush on close failed: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0 or not self._drain_once(remaining):
                    break
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self._reader.close()
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain_once(self, timeout: float) -> bool:
        """Read and discard one chunk. False once the client has closed."""
        self.socket.settimeout(timeout)
        return bool(self.socket.recv(4096))

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows using Connection with a 'with' statement:

            with conn:
                line = conn.read_request_line()
                ...
            # Connection closed here, even on error
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
