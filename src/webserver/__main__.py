"""
=============================================================================
WEB SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on port 8080
    python -m webserver

    # Custom port
    python -m webserver 3000

    # Serve another directory, localhost only
    python -m webserver 3000 --root ./public --host 127.0.0.1

At most one positional argument (the port) is accepted. A second one, or
a port that is not an integer, prints usage to stderr and exits without
starting the server.

Settings not given on the command line come from the environment
(WEBSERVER_HOST, WEBSERVER_PORT, WEBSERVER_ROOT, WEBSERVER_LOG_LEVEL),
then from the defaults in config.py.

=============================================================================
"""

import argparse
import sys
from typing import Optional

from . import __version__
from .config import ServerConfig, LOG_LEVELS
from .server import WebServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webserver",
        description="Minimal HTTP/1.1 file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webserver                     # Port 8080, current directory
  python -m webserver 3000                # Custom port
  python -m webserver --root ./public     # Serve another directory
        """
    )

    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Document root to serve files from (default: current directory)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"SimpleWebServer {__version__}"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code: 0 after a clean stop, 1 if the server could not
        start. Usage errors exit with status 2 from argparse.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env()
    except ValueError as e:
        print(f"Invalid environment: {e}", file=sys.stderr)
        return 1

    # Command-line arguments override the environment
    if args.port is not None:
        config.port = args.port
    if args.host is not None:
        config.host = args.host
    if args.root is not None:
        config.document_root = args.root
    if args.log_level is not None:
        config.log_level = args.log_level

    try:
        server = WebServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not server.run():
        print("Execution failed!", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
