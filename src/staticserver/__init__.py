"""
=============================================================================
STATICSERVER - A Minimal HTTP/1.1 Static File Server
=============================================================================

Serves files from a directory over plain sockets, one connection at a
time. No frameworks, no threads, no keep-alive.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    staticserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m staticserver)
    ├── server.py            # StaticFileServer: the per-connection pipeline
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Bind, listen, sequential accept loop
    │   └── connection.py    # Single read, send, guaranteed close
    ├── http/                # HTTP wire format
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response framing + HTML error pages
    │   ├── status_codes.py  # Status codes and reason phrases
    │   └── mime_types.py    # Extension → Content-Type
    └── handlers/
        └── static.py        # Path resolution and file loading

=============================================================================
QUICK START
=============================================================================

    from staticserver import StaticFileServer, ServerConfig

    server = StaticFileServer(ServerConfig(port=8080, document_root="public"))
    server.run()

or from a shell:

    python -m staticserver --root public

=============================================================================
"""

__version__ = "1.0.0"

from .server import StaticFileServer
from .config import ServerConfig

__all__ = ["StaticFileServer", "ServerConfig", "__version__"]
