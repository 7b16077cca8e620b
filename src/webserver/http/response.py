"""
=============================================================================
HTTP RESPONSE WRITER
=============================================================================

Writes the status line, headers and body of a response to a byte stream.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                      ← status line           │
    │    Date: Wed, 01 May 2024 12:00:00 GMT\r\n                           │
    │    Server: SimpleWebServer/1.0\r\n                                   │
    │    Connection: close\r\n                                             │
    │    Content-Type: text/html\r\n                                       │
    │    \r\n                                     ← end of headers        │
    │    <html>...                                ← body                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no Content-Length header. Every response ends by closing the
connection, and that close is how the client knows the body is complete.
This is why "Connection: close" is always sent.

=============================================================================
BODY SELECTION
=============================================================================

    NOT_FOUND             → fixed 404 page
    DEFAULT_PAGE          → fixed welcome page
    FILE + text/html      → wrapper + file lines through substitute()
    FILE + image/*        → raw file bytes, untouched

The body is STREAMED to the output: HTML files line by line, images in
chunks. Nothing is buffered whole, so the header block may already be on
the wire when a file read fails.

=============================================================================
"""

import shutil
from datetime import date, datetime, timezone
from typing import BinaryIO, Optional

from .mime_types import ContentType
from .resource import ResolvedResource, ResourceKind
from .status_codes import HTTPStatus
from .template import TemplateContext, substitute


HTTP_VERSION = "HTTP/1.1"
CRLF = b"\r\n"

NOT_FOUND_PAGE = (
    b"<html><head><title>404 Not Found</title></head><body>\n"
    b"<h3>404 Not Found</h3>\n"
    b"</body></html>\n"
)

WELCOME_PAGE = (
    b"<html><head><title>Welcome</title></head><body>\n"
    b"<h3>My web server works!</h3>\n"
    b"</body></html>\n"
)

HTML_OPEN = b"<html><head><title>Welcome</title></head><body>\n"
HTML_CLOSE = b"</body></html>\n"


class ResponseWriter:
    """
    Writes one response to a binary stream.

    The writer does not flush or close the stream; the request handler
    owns the connection and does both.

    Usage:
        writer = ResponseWriter(stream, server_name="SimpleWebServer/1.0")
        writer.write_header(resource.status, content_type)
        writer.write_body(resource, content_type)
    """

    def __init__(
        self,
        stream: BinaryIO,
        server_name: str = "SimpleWebServer/1.0",
        template_server_name: str = "SimpleWebServer",
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ):
        """
        Args:
            stream: Writable binary stream (a socket file in production).
            server_name: Value of the Server header.
            template_server_name: Replacement for the <cs371server> marker.
            now: Response time for the Date header. Defaults to the
                 current UTC time.
            today: Date for the <cs371date> marker. Defaults to the local
                   calendar date at `now`.
        """
        self.stream = stream
        self.server_name = server_name
        self.now = now or datetime.now(timezone.utc)
        self.template = TemplateContext.create(
            template_server_name,
            today=today or self.now.astimezone().date(),
        )

    # =========================================================================
    # HEADER BLOCK
    # =========================================================================

    def header_lines(self, status: HTTPStatus, content_type: ContentType) -> list[str]:
        """The header block as a list of lines, without terminators."""
        return [
            f"{HTTP_VERSION} {status.value} {status.phrase}",
            f"Date: {format_http_date(self.now)}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {content_type.mime}",
        ]

    def write_header(self, status: HTTPStatus, content_type: ContentType) -> None:
        """
        Write the status line and headers, ending with one blank line.

        Header values are ASCII, so latin-1 encoding is exact.
        """
        block = "".join(line + "\r\n" for line in self.header_lines(status, content_type))
        self.stream.write(block.encode("latin-1") + CRLF)

    # =========================================================================
    # BODY
    # =========================================================================

    def write_body(self, resource: ResolvedResource, content_type: ContentType) -> None:
        """
        Write the body for a resolved resource.

        Raises:
            OSError: If a FILE resource cannot be read. Whatever was already
                     written stays written.
        """
        if resource.kind is ResourceKind.NOT_FOUND:
            self.stream.write(NOT_FOUND_PAGE)
        elif resource.kind is ResourceKind.DEFAULT_PAGE:
            self.stream.write(WELCOME_PAGE)
        elif content_type.is_binary:
            self._write_binary_file(resource)
        else:
            self._write_html_file(resource)

    def _write_html_file(self, resource: ResolvedResource) -> None:
        """
        Stream an HTML file through template substitution.

        Lines keep the terminator they were read with; the last line of a
        file without a trailing newline is written without one.
        """
        self.stream.write(HTML_OPEN)
        with open(resource.path, "rb") as f:
            for line in f:
                self.stream.write(substitute(line, self.template))
        self.stream.write(HTML_CLOSE)

    def _write_binary_file(self, resource: ResolvedResource) -> None:
        """Copy an image file to the stream byte-for-byte."""
        with open(resource.path, "rb") as f:
            shutil.copyfileobj(f, self.stream)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231 IMF-fixdate).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 May 2024 12:00:00 GMT

    HTTP dates are always GMT. Aware datetimes are converted to UTC first;
    naive ones are assumed to already be UTC.

    Names are spelled out here rather than taken from strftime("%a"),
    which follows the process locale.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, {dt.day:02d} {months[dt.month - 1]} "
        f"{dt.year} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
