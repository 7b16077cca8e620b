"""
=============================================================================
TEMPLATE SUBSTITUTION
=============================================================================

Rewrites marker tags inside HTML files as they are served.

=============================================================================
MARKERS
=============================================================================

    ┌───────────────────┬─────────────────────────────────────────────────┐
    │  <cs371date>      │  Current date, YYYY-MM-DD                       │
    │  <cs371server>    │  The configured template server name            │
    └───────────────────┴─────────────────────────────────────────────────┘

    Today is <cs371date>, served by <cs371server>.
                        │
                        ▼
    Today is 2024-05-01, served by SimpleWebServer.

Every occurrence in a line is replaced, and the two markers are
independent. A line with no marker comes back byte-identical.

Lines are handled as bytes. The file is never decoded, so a file in any
ASCII-compatible encoding passes through unchanged apart from the markers.

=============================================================================
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


DATE_MARKER = b"<cs371date>"
SERVER_MARKER = b"<cs371server>"


@dataclass(frozen=True)
class TemplateContext:
    """
    Values substituted into one response.

    Built once per response, so every <cs371date> in a file gets the same
    date even if the response is written across midnight.
    """

    today: date
    server_name: str

    @classmethod
    def create(cls, server_name: str, today: Optional[date] = None) -> "TemplateContext":
        return cls(today=today or date.today(), server_name=server_name)

    @property
    def date_bytes(self) -> bytes:
        return self.today.isoformat().encode("ascii")

    @property
    def server_bytes(self) -> bytes:
        return self.server_name.encode("utf-8")


def substitute(line: bytes, context: TemplateContext) -> bytes:
    """
    Replace all markers in one line.

    Args:
        line: A line of an HTML file, including its terminator if any.
        context: Values to substitute.

    Returns:
        The rewritten line.
    """
    if DATE_MARKER in line:
        line = line.replace(DATE_MARKER, context.date_bytes)
    if SERVER_MARKER in line:
        line = line.replace(SERVER_MARKER, context.server_bytes)
    return line
