"""
=============================================================================
WEB SERVER
=============================================================================

Ties the pieces together: a SocketServer accepts connections and a new
thread runs RequestHandler.handle() for each one.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer (main thread)                                        │
    │       │                                                              │
    │       │ accept() → Connection                                       │
    │       ▼                                                              │
    │   WebServer._handle_connection(conn)                                 │
    │       │                                                              │
    │       │ threading.Thread(target=handler.handle, args=(conn,))       │
    │       ▼                                                              │
    │   ┌──────────┐  ┌──────────┐  ┌──────────┐                          │
    │   │ thread 1 │  │ thread 2 │  │ thread 3 │   one per connection     │
    │   │  conn 1  │  │  conn 2  │  │  conn 3  │   exits when it closes   │
    │   └──────────┘  └──────────┘  └──────────┘                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Threads share nothing but the read-only config and filesystem, so there
are no locks. A slow client blocks its own thread; the accept loop keeps
going.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import RequestHandler


logger = logging.getLogger(__name__)


class WebServer:
    """
    Minimal HTTP/1.1 file server.

    Example:
        server = WebServer(ServerConfig(port=8080))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._handler = RequestHandler(self.config)

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    @property
    def address(self):
        """Bound (host, port) once running."""
        return self._socket_server.address

    def run(self) -> bool:
        """
        Start the server (blocking).

        Returns:
            False if the listening socket could not be bound, True after the
            accept loop has stopped.
        """
        self._setup_logging()

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port} "
            f"(root: {self.config.document_root})"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except OSError as e:
            logger.error(f"Execution failed: {e}")
            return False
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

        logger.info("Server stopped")
        return True

    def shutdown(self):
        """Stop accepting connections. In-flight connections finish on their own."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("webserver").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """
        Hand a connection to a new thread.

        Called by SocketServer on the accept thread, so it must not block.
        """
        worker = threading.Thread(
            target=self._handler.handle,
            args=(conn,),
            name=f"webworker-{conn.id}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            # Thread limit reached; drop this one client, keep accepting
            logger.error(f"[{conn.id}] Could not start worker thread: {e}")
            conn.close()
