"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the web server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m webserver 3000                                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEBSERVER_PORT=3000 python -m webserver                   │
    │                                                                      │
    │   3. Defaults (this file)                                           │
    │      └── port 8080, current directory as document root             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no read timeout setting. A client that never sends
its blank line holds its own worker thread until it disconnects.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass


DEFAULT_PORT = 8080

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the web server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog

    CONTENT
    - document_root, server_name, template_server_name

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces (default)
    - "127.0.0.1" - Localhost only
    """

    port: int = DEFAULT_PORT
    """The TCP port to accept connections on."""

    backlog: int = 128
    """
    Maximum number of queued connections.
    When the accept queue is full, new connections are refused.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "."
    """
    Directory that request targets are resolved against.
    "/index.html" is served from <document_root>/index.html.
    """

    server_name: str = "SimpleWebServer/1.0"
    """Value of the Server response header."""

    template_server_name: str = "SimpleWebServer"
    """Text that replaces <cs371server> in served HTML files."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG also logs every discarded header line.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBSERVER_HOST       Bind address (default: 0.0.0.0)
        WEBSERVER_PORT       Port (default: 8080)
        WEBSERVER_ROOT       Document root (default: .)
        WEBSERVER_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================

        Raises:
            ValueError: If WEBSERVER_PORT is not an integer.
        """
        return cls(
            host=os.getenv("WEBSERVER_HOST", "0.0.0.0"),
            port=int(os.getenv("WEBSERVER_PORT", str(DEFAULT_PORT))),
            document_root=os.getenv("WEBSERVER_ROOT", "."),
            log_level=os.getenv("WEBSERVER_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        """The log level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad port or root fails before we bind.

        Raises:
            ValueError: Describing the first invalid value found.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if not os.path.isdir(self.document_root):
            raise ValueError(f"Document root is not a directory: {self.document_root}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
