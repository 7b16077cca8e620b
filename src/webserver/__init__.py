"""
=============================================================================
SIMPLE WEB SERVER
=============================================================================

A minimal single-host HTTP/1.1 file server built on raw sockets.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           REQUEST FLOW                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   TCP accept ──► new thread ──► read request line                   │
    │                                      │                               │
    │                                      ▼                               │
    │                    resolve: FILE | DEFAULT_PAGE | NOT_FOUND          │
    │                                      │                               │
    │                                      ▼                               │
    │                    classify: text/html | image/gif|jpeg|png         │
    │                                      │                               │
    │                                      ▼                               │
    │                    headers + body (HTML templated) ──► close         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One request per connection, GET only, no Content-Length: the response
ends when the connection closes.

HTML files may contain two markers that are filled in as they are served:

    <cs371date>     today's date (YYYY-MM-DD)
    <cs371server>   the configured server name

=============================================================================
QUICK START
=============================================================================

    from webserver import WebServer, ServerConfig

    server = WebServer(ServerConfig(port=8080, document_root="./public"))
    server.run()

Or from the command line:

    python -m webserver 8080 --root ./public

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import WebServer

__all__ = ["WebServer", "ServerConfig", "__version__"]
