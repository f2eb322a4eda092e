"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket.

=============================================================================
ONE READ, ONE RESPONSE, ONE CLOSE
=============================================================================

TCP is a byte stream, so in general a request can arrive split across
several recv() calls. This server deliberately does NOT loop: it does a
single recv() of up to 8 KB and treats whatever came back as the whole
request.

    recv() returns          Meaning                 What happens
    ──────────────          ───────                 ────────────
    b"GET / HTTP/1.1..."    request bytes           parse + respond
    b""                     client closed           log, close
    socket.timeout          nothing in 5 seconds    log, close
    OSError                 connection broken       log, close

A request that is split across packets, or bigger than the buffer, will
usually be missing its \\r\\n\\r\\n and get a 400.

=============================================================================
GUARANTEED RELEASE
=============================================================================

Whatever happens, the socket is closed exactly once. Use the connection
as a context manager:

    with Connection(socket=client_socket, address=client_address) as conn:
        data = conn.read_request()
        ...
    # closed here, even if an exception escaped

close() is idempotent, so an explicit close() inside the block is safe.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)

# Upper bounds on the discard phase of close(). The server handles one
# connection at a time, so a peer that keeps sending must not hold it.
DRAIN_TIMEOUT = 0.5        # seconds, total
DRAIN_LIMIT = 64 * 1024    # bytes


class ConnectionState(Enum):
    """Connection lifecycle states."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Waiting for the request bytes
    PROCESSING = "processing"  # Parsing, resolving, loading
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        buffer_size: Maximum bytes taken by the single read.
        timeout: Seconds to wait for the request.
        id: Short identifier for log lines.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    buffer_size: int = 8192
    timeout: float = 5.0

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Do the single read for this connection.

        Returns:
            The bytes read (b"" if the client closed the connection), or
            None if the read failed or timed out. Failures are logged here.
        """
        self.state = ConnectionState.READING

        try:
            self.socket.settimeout(self.timeout)
            return self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.info(f"[{self.id}] Read timed out after {self.timeout}s")
            return None
        except OSError as e:
            logger.warning(f"[{self.id}] Read failed: {e}")
            return None

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send bytes to the client with sendall().

        Returns:
            True if everything was sent, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        1. shutdown(SHUT_WR)   send FIN: "no more data from us"
        2. drain               discard what the client still sends, so
                               close() doesn't turn into a RST that could
                               cut off our response (bounded, see _drain)
        3. close()             release the file descriptor
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self._drain()
        except OSError:
            pass  # Includes socket.timeout; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self):
        """
        Discard incoming bytes until the peer closes, DRAIN_TIMEOUT seconds
        have passed in total, or DRAIN_LIMIT bytes have been thrown away.
        """
        deadline = time.monotonic() + DRAIN_TIMEOUT
        discarded = 0

        while discarded < DRAIN_LIMIT:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.socket.settimeout(remaining)
            chunk = self.socket.recv(4096)
            if not chunk:
                break
            discarded += len(chunk)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
