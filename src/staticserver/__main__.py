"""
=============================================================================
STATICSERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 0.0.0.0:8080
    python -m staticserver

    # Another port and directory
    python -m staticserver --port 3000 --root ./public

    # Re-check paths after percent-decoding
    python -m staticserver --strict-paths

Defaults come from the environment (see ServerConfig.from_env), and
command-line flags override them.

Exit status: 0 after a clean shutdown, 1 if the configuration is invalid
or the port cannot be bound.

=============================================================================
"""

import argparse
import logging
import sys

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import StaticFileServer


logger = logging.getLogger("staticserver")


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticserver",
        description="Minimal single-connection HTTP/1.1 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticserver                       # Serve . on port 8080
  python -m staticserver --port 3000           # Custom port
  python -m staticserver --root ./public       # Serve another directory
  python -m staticserver --host 127.0.0.1      # Localhost only
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Address to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help=f"Seconds to wait for a request (default: {defaults.timeout})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help=f"Directory to serve files from (default: {defaults.document_root})"
    )

    parser.add_argument(
        "--strict-paths",
        action="store_true",
        default=defaults.strict_paths,
        help="Reject paths that become unsafe after percent-decoding"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"staticserver {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        backlog=defaults.backlog,
        document_root=args.root,
        strict_paths=args.strict_paths,
        log_level=args.log_level,
    )

    try:
        server = StaticFileServer(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        logger.critical(f"Fatal: cannot start server: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
