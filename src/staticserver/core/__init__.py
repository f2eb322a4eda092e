"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  SocketServer                                                       │
    │  • Binds and listens on the TCP port                                │
    │  • Accepts connections one at a time                                │
    │  • Hands each one to the HTTP layer, then accepts the next          │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │  Connection                                                         │
    │  • One recv() with a timeout                                        │
    │  • sendall() of the response                                        │
    │  • Closed exactly once, whatever happened                           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
