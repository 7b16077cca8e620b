"""
=============================================================================
HTTP REQUEST LINE PARSING
=============================================================================

Parses the first line of an HTTP request.

=============================================================================
WHAT WE LOOK AT
=============================================================================

An HTTP request starts with a request line, followed by headers, followed
by an empty line:

    GET /index.html HTTP/1.1\r\n       ← request line (the only part we use)
    Host: localhost:8080\r\n           ← header  (read and discarded)
    User-Agent: curl/8.0\r\n           ← header  (read and discarded)
    \r\n                               ← end of header block

The request line has three space-separated parts:

    GET /index.html HTTP/1.1
    ─┬─ ─────┬───── ───┬────
     │       │         │
     │       │         └── Version (ignored)
     │       └──────────── Target  (which file to serve)
     └──────────────────── Method  (only GET is served)

No header values are interpreted: no Host, no conditional requests, no
Range. Reading the header block itself is the connection's job (see
core/connection.py); this module only splits the line.

=============================================================================
MALFORMED LINES ARE NOT ERRORS
=============================================================================

A line with fewer than two tokens does not raise. It parses into a
RequestLine with no target, which resolve() turns into a 404. Only a
stream that ends before the blank line aborts the connection.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestLine:
    """
    Parsed request line.

    Attributes:
        method: First token, e.g. "GET". Empty string for an empty line.
        target: Second token, e.g. "/index.html". None if missing.
        raw: The line exactly as read, for logging.
    """

    method: str
    target: Optional[str] = None
    raw: str = ""

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @property
    def is_well_formed(self) -> bool:
        """True when both a method and a target are present."""
        return bool(self.method) and self.target is not None

    def __str__(self) -> str:
        return self.raw


def parse_request_line(line: str) -> RequestLine:
    """
    Split a request line into method and target.

    The line is split on single spaces, the same way it is written on the
    wire. Anything after the target (the version) is ignored.

    Args:
        line: The first line of the request, without its line terminator.

    Returns:
        RequestLine. Never raises.

    Examples:
        >>> parse_request_line("GET /a.html HTTP/1.1")
        RequestLine(method='GET', target='/a.html', raw='GET /a.html HTTP/1.1')

        >>> parse_request_line("GET").target is None
        True
    """
    tokens = line.split(" ")
    method = tokens[0]
    target = tokens[1] if len(tokens) >= 2 else None
    return RequestLine(method=method, target=target, raw=line)
