"""
=============================================================================
CORE NETWORKING
=============================================================================

Low-level networking building blocks:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SocketServer (socket_server.py)                                     │
    │   bind / listen / accept; hands each client to a callback          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Connection (connection.py)                                          │
    │   one client socket as a line reader + buffered writer             │
    └─────────────────────────────────────────────────────────────────────┘

Concurrency lives one level up, in server.py: one thread per Connection.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, IncompleteRequestError

__all__ = [
    "SocketServer",           # Accepts connections
    "Connection",             # Wrapper for client socket
    "ConnectionState",        # Connection lifecycle states
    "IncompleteRequestError", # Request ended before its blank line
]
