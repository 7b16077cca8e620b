"""
=============================================================================
HTTP PROTOCOL HANDLING
=============================================================================

The protocol half of the server: everything between "here is the first
line of a request" and "here are the bytes of the response".

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST LINE (request.py)                                           │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   "GET /index.html HTTP/1.1"                                 │
    │ Output:  RequestLine(method="GET", target="/index.html")            │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESOURCE RESOLUTION (resource.py)                                   │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   RequestLine + document root                                │
    │ Output:  ResolvedResource: FILE(path) | DEFAULT_PAGE | NOT_FOUND    │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ CLASSIFIER (mime_types.py)                                          │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   ResolvedResource                                           │
    │ Output:  ContentType.HTML | GIF | JPEG | PNG                        │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE WRITER (response.py) + TEMPLATES (template.py)             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   status, content type, resource, output stream              │
    │ Output:  header block + body written to the stream                  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .status_codes import HTTPStatus
from .request import RequestLine, parse_request_line
from .resource import ResolvedResource, ResourceKind, resolve
from .mime_types import ContentType, classify
from .template import TemplateContext, substitute
from .response import ResponseWriter, format_http_date

__all__ = [
    # Status
    "HTTPStatus",

    # Request
    "RequestLine",
    "parse_request_line",

    # Resolution
    "ResolvedResource",
    "ResourceKind",
    "resolve",

    # Classification
    "ContentType",
    "classify",

    # Templates
    "TemplateContext",
    "substitute",

    # Response
    "ResponseWriter",
    "format_http_date",
]
