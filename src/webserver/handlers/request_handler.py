"""
=============================================================================
REQUEST HANDLER
=============================================================================

Runs one request/response cycle on one connection, then closes it.

=============================================================================
THE CYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    RequestHandler.handle(conn)                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. conn.read_request_line()     first line, headers discarded     │
    │   2. parse_request_line(line)     → RequestLine                     │
    │   3. resolve(request, root)       → ResolvedResource                │
    │   4. classify(resource)           → ContentType                     │
    │   5. write_header(resource.status, content_type)                    │
    │      write_body(resource, content_type)                             │
    │   6. flush, close                                                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURES STAY IN THIS CONNECTION
=============================================================================

handle() never raises. Anything that goes wrong is logged with the
request line (if we got that far) and the connection is closed:

    Stream ends before blank line   → no response at all
    File read fails mid-body        → whatever was flushed stays sent

Nothing is retried, and no other connection is affected: a handler has no
state beyond its config, so one instance can serve every thread.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import ServerConfig
from ..core.connection import Connection, IncompleteRequestError
from ..http.mime_types import classify
from ..http.request import RequestLine, parse_request_line
from ..http.resource import ResolvedResource, resolve
from ..http.response import ResponseWriter


logger = logging.getLogger(__name__)

# One line per completed response, e.g.
#   127.0.0.1:51514 "GET /index.html HTTP/1.1" 200 text/html
access_logger = logging.getLogger("webserver.access")


class RequestHandler:
    """
    Serves one request per connection from a document root.

    Usage:
        handler = RequestHandler(config)
        threading.Thread(target=handler.handle, args=(conn,)).start()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.root = Path(self.config.document_root)

    def handle(self, conn: Connection) -> None:
        """
        Perform exactly one request/response cycle on `conn`.

        The connection is always closed on return.
        """
        logger.debug(f"[{conn.id}] Handling connection from {conn.client}")
        request: Optional[RequestLine] = None

        with conn:
            try:
                request = parse_request_line(conn.read_request_line())
                resource = self.process(request, conn)
                access_logger.info(
                    f'{conn.client} "{request}" {resource.status.value} '
                    f"{classify(resource).mime}"
                )
            except IncompleteRequestError as e:
                logger.warning(f"[{conn.id}] Request error: {e}")
            except Exception as e:
                logger.exception(
                    f"[{conn.id}] Output error while serving {str(request)!r}: {e}"
                )

        logger.debug(f"[{conn.id}] Done handling connection")

    def process(self, request: RequestLine, conn: Connection) -> ResolvedResource:
        """
        Resolve `request` and write the full response to `conn`.

        Status line and body are both chosen from the one ResolvedResource
        returned here.

        Raises:
            OSError: If the resolved file cannot be read or the client
                     goes away mid-response.
        """
        resource = resolve(request, self.root)
        content_type = classify(resource)

        writer = ResponseWriter(
            conn.writer,
            server_name=self.config.server_name,
            template_server_name=self.config.template_server_name,
        )
        writer.write_header(resource.status, content_type)
        writer.write_body(resource, content_type)
        conn.flush()

        return resource
