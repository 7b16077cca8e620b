"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can answer with, plus their reason phrases.

=============================================================================
ONLY TWO OUTCOMES
=============================================================================

Every request ends in exactly one of two status lines:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK          - a file or the default welcome page          │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  404   │ Not Found   - anything else (missing file, non-GET,       │
    │        │               malformed request line)                     │
    └────────┴───────────────────────────────────────────────────────────┘

The status is derived from the resolved resource (see resource.py), never
recomputed on its own.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum, so values compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
