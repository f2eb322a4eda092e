"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass, with defaults matching the server's fixed
behavior: port 8080 on all interfaces, backlog 10, one 8 KB read with a
5 second timeout, files served from the working directory.

    config = ServerConfig()                 # defaults
    config = ServerConfig(port=3000)        # override in code
    config = ServerConfig.from_env()        # override from environment

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


_TRUE_VALUES = ("1", "true", "yes", "on")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class ServerConfig:
    """
    Configuration for the static file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    FILES
    - document_root, index_file, strict_paths

    LOGGING / IDENTITY
    - log_level, server_name

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. "0.0.0.0" means all IPv4 interfaces."""

    port: int = 8080
    """TCP port. 0 lets the OS pick a free one (handy in tests)."""

    backlog: int = 10
    """Pending connections the OS queues before refusing new ones."""

    buffer_size: int = 8192
    """Size of the single recv() per connection. The whole request must fit."""

    timeout: float = 5.0
    """Seconds to wait for the request bytes before giving up."""

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "."
    """Directory request paths are resolved against."""

    index_file: str = "index.html"
    """File served for "/" and the empty path."""

    strict_paths: bool = False
    """
    Re-check paths after percent-decoding.

    Off by default: the plain lexical check on the raw path is the
    server's long-standing behavior.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    server_name: str = "StaticServer/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST           Bind address (default: 0.0.0.0)
        HTTP_PORT           Port (default: 8080)
        HTTP_BACKLOG        Listen backlog (default: 10)
        HTTP_TIMEOUT        Read timeout in seconds (default: 5)
        HTTP_DOCUMENT_ROOT  Directory to serve (default: .)
        HTTP_STRICT_PATHS   "1"/"true" to re-check decoded paths
        HTTP_LOG_LEVEL      Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            backlog=int(os.getenv("HTTP_BACKLOG", "10")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "5")),
            document_root=os.getenv("HTTP_DOCUMENT_ROOT", "."),
            strict_paths=_env_bool("HTTP_STRICT_PATHS", False),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast: a bad value should stop the server at startup, not
        surface on the first request.

        Raises:
            ValueError: Describing the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.index_file:
            raise ValueError("index_file must not be empty")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
