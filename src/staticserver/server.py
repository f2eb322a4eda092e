"""
=============================================================================
STATIC FILE SERVER
=============================================================================

Ties the pieces together into the per-connection pipeline:

    SocketServer.accept()
          │
          ▼
    Connection.read_request()      one recv(), 5 s timeout
          │
          ├── None / b""  ──────────────────────────────► close
          │
          ▼
    RequestParser.parse()          400 / 405 on failure ─┐
          │                                              │
          ▼                                              │
    StaticFileHandler.handle()     403 / 404 on failure ─┤
          │                                              │
          ▼                                              ▼
    Connection.send(response.to_bytes())  ◄──────────────┘
          │
          ▼
    Connection.close()             always, exactly once

Nothing runs concurrently: a connection is finished and closed before the
next one is accepted.

=============================================================================
"""

import logging

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import StaticFileHandler
from .http import (
    HTTPParseError,
    HTTPResponse,
    RequestParser,
    error_response,
    internal_error,
)
from .http.request import decode_wire, first_line


logger = logging.getLogger(__name__)


class StaticFileServer:
    """
    Single-connection-at-a-time HTTP/1.1 static file server.

    Usage:
        server = StaticFileServer(ServerConfig(port=8080, document_root="public"))
        server.run()    # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: ServerConfig = None):
        """
        Args:
            config: Server configuration. Defaults are used if omitted.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._static = StaticFileHandler(
            root_dir=self.config.document_root,
            index_file=self.config.index_file,
            strict_paths=self.config.strict_paths,
        )

    @property
    def address(self):
        """Bound (host, port) once running."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start serving (blocking).

        Raises:
            OSError: If the listening socket cannot be set up.
        """
        self._setup_logging()

        logger.info(
            f"{self.config.server_name} starting on "
            f"{self.config.host}:{self.config.port}, "
            f"serving {self.config.document_root}"
        )

        try:
            self._socket_server.start(self.handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

        logger.info("Server stopped")

    def _setup_logging(self):
        """
        Configure console logging.

        Lines look like: [2026-01-15 12:30:45] Client connected: 127.0.0.1
        """
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="[%(asctime)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("staticserver").setLevel(level)

    def shutdown(self):
        """Ask the accept loop to stop. Returns immediately."""
        logger.info("Shutting down server...")
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: float = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def wait_for_shutdown(self, timeout: float = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_connection(self, conn: Connection):
        """
        Serve one connection: read once, respond at most once, close.

        Args:
            conn: The accepted client connection. Always closed on return.
        """
        with conn:
            data = conn.read_request()

            if data is None:
                return  # Timeout or read error, already logged

            if not data:
                logger.info(f"[{conn.id}] Client {conn.client_ip} closed the connection")
                return

            logger.info(f"Request: {decode_wire(first_line(data))}")

            conn.state = ConnectionState.PROCESSING
            response = self.handle_request(data)
            conn.send(response.to_bytes(server_name=self.config.server_name))

    def handle_request(self, data: bytes) -> HTTPResponse:
        """
        Run the parse → resolve → load pipeline on raw request bytes.

        Never raises: every failure becomes an HTML error response.

        Args:
            data: The bytes of one request.

        Returns:
            The response to send.
        """
        try:
            request = self._parser.parse(data)
        except HTTPParseError as e:
            logger.warning(f"Rejected request ({e.status_code}): {e}")
            return error_response(e.status_code, str(e))

        try:
            return self._static.handle(request)
        except Exception as e:
            logger.exception(f"Error handling {request.request_line!r}: {e}")
            return internal_error()
