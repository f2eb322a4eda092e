"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

The listener: binds a TCP socket, listens, and accepts connections one
after another.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create an IPv4 TCP socket
    2. setsockopt  SO_REUSEADDR, so a restart can rebind right away
    3. bind()      Claim HOST:PORT (default 0.0.0.0:8080)
    4. listen(10)  OS queues up to 10 connections we haven't accepted yet
    5. accept()    Take the next one, hand it off, repeat
    6. close()     On shutdown

If any of steps 1-4 fail the server cannot run at all: the error is
raised to the caller. Once we are listening, nothing that happens to a
single client (a failed accept included) stops the loop.

=============================================================================
ONE AT A TIME
=============================================================================

The connection handler runs to completion before the next accept():

    accept ─► handle(conn) ─► accept ─► handle(conn) ─► ...

While one client is being served (up to its 5 second read timeout)
others wait in the listen backlog. Past 10 waiting, the OS refuses them.

=============================================================================
SHUTDOWN
=============================================================================

accept() runs with a 1 second timeout so the loop can notice shutdown()
being called from a signal handler or another thread:

    while running:
        try:
            accept()          # at most 1 second
        except timeout:
            continue          # re-check running

SIGINT (Ctrl+C) and SIGTERM both trigger shutdown() when the server
runs on the main thread.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

# How often accept() wakes up to check for shutdown.
ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Sequential TCP accept loop.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        The socket itself is created in start().
        """
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._shutdown_event = threading.Event()
        self._ready_event = threading.Event()
        self._original_handlers: dict = {}
        self._bound_address: Optional[Tuple[str, int]] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the configured values before start()."""
        return self._bound_address or (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create the listening socket with SO_REUSEADDR set."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return sock

    def _setup_signals(self):
        """
        Route SIGTERM/SIGINT to shutdown().

        signal.signal() only works on the main thread; anywhere else
        (tests, embedding) the caller is expected to call shutdown().
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen, and run the accept loop.

        Blocks until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. It
                                owns the connection and must close it.

        Raises:
            OSError: If the socket cannot be created, bound or put into
                     listening mode. The socket is closed before raising.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to listen on {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._bound_address = self._socket.getsockname()[:2]
        self._socket.settimeout(ACCEPT_POLL_INTERVAL)

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Listening on {host}:{port} (backlog {self.config.backlog})")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until shutdown.

        accept() errors are logged and skipped. The handler is called
        inline: the next accept() waits for it to return.
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Accept failed: {e}")
                continue

            logger.info(f"Client connected: {client_address[0]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop the accept loop. Safe to call more than once, from any thread."""
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        self._shutdown_event.set()
        logger.debug("Listening socket closed")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the socket is listening. Returns False on timeout."""
        return self._ready_event.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Wait for the server to shut down. Returns False on timeout."""
        return self._shutdown_event.wait(timeout)
