"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Maps a request path onto a file under the document root and serves it.

    GET /css/site.css
         │
         ▼
    resolve_path()   "/css/site.css" → "css/site.css"
         │
         ▼
    read_file()      <document_root>/css/site.css → bytes
         │
         ▼
    200 text/css     (or 403 / 404 error page)

=============================================================================
PATH RESOLUTION, STEP BY STEP
=============================================================================

    1. REJECT   Raw path contains "..", "//" or "\"     → 403 Forbidden
    2. DEFAULT  "" or "/"                               → "index.html"
       STRIP    otherwise drop ONE leading "/"
    3. DECODE   "%XX" → byte XX, "+" → space

The order matters. Decoding runs AFTER the leading slash is stripped,
so "/%2Ffile.txt" becomes "%2Ffile.txt" and then "/file.txt".

=============================================================================
SECURITY: THE FILTER IS LEXICAL
=============================================================================

Step 1 looks at the raw text only. It does not canonicalize, and it does
not look again after decoding:

    GET /%2E%2E/secret        passes step 1, decodes to "../secret"
    GET /%2Fetc/passwd        passes step 1, decodes to "/etc/passwd"
    GET /link-to-elsewhere    symlinks are followed

That is the behavior clients of this server have always seen, so it is
the default. Pass strict=True (ServerConfig.strict_paths) to re-check the
decoded path and refuse absolute results as well.

=============================================================================
FILE ACCESS
=============================================================================

Files are read whole into memory. "Does not exist", "is empty",
"permission denied" and "is a directory" all come back as b"" and all
become 404 Not Found.

=============================================================================
"""

import logging
from pathlib import Path
from urllib.parse import unquote_plus

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, forbidden, not_found
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILE = "index.html"

# Substrings that make a raw request path unsafe.
UNSAFE_SEQUENCES = ("..", "//", "\\")


class UnsafePathError(ValueError):
    """Raised when a request path fails the traversal filter (403)."""


def is_safe_path(path: str) -> bool:
    """True if path contains none of "..", "//" or "\\"."""
    return not any(seq in path for seq in UNSAFE_SEQUENCES)


def percent_decode(path: str) -> str:
    """
    Decode "%XX" escapes and turn "+" into a space.

    Escapes decode to raw bytes; bytes that are not valid UTF-8 are kept
    as surrogate escapes so the filesystem sees exactly what was sent.
    A "%" not followed by two hex digits is left as it is.
    """
    return unquote_plus(path, encoding="utf-8", errors="surrogateescape")


def resolve_path(
    raw_path: str,
    index_file: str = DEFAULT_INDEX_FILE,
    strict: bool = False,
) -> str:
    """
    Turn a raw request path into a filesystem-relative path.

    Args:
        raw_path: Path from the request line, still percent-encoded.
        index_file: Served for "" and "/".
        strict: Also reject paths that become unsafe or absolute
                after decoding.

    Returns:
        The decoded relative path.

    Raises:
        UnsafePathError: If the path is rejected.
    """
    if not is_safe_path(raw_path):
        raise UnsafePathError(f"Unsafe path: {raw_path}")

    if raw_path in ("", "/"):
        path = index_file
    elif raw_path.startswith("/"):
        path = raw_path[1:]
    else:
        path = raw_path

    decoded = percent_decode(path)

    if strict and (not is_safe_path(decoded) or decoded.startswith("/")):
        raise UnsafePathError(f"Unsafe path after decoding: {raw_path}")

    return decoded


def read_file(root, relative_path: str) -> bytes:
    """
    Read a whole file into memory.

    Args:
        root: Document root directory.
        relative_path: Resolved path under the root. An absolute path
                       replaces the root entirely (pathlib join rules).

    Returns:
        The file's bytes, or b"" if it could not be read or is empty.
    """
    try:
        return (Path(root) / relative_path).read_bytes()
    except (OSError, ValueError) as e:
        # ValueError: embedded NUL byte (e.g. from "%00")
        logger.debug(f"Cannot read {relative_path!r}: {e}")
        return b""


class StaticFileHandler:
    """
    Serves files from a document root.

    Usage:
        static = StaticFileHandler(root_dir=".")
        response = static.handle(request)
    """

    def __init__(
        self,
        root_dir=".",
        index_file: str = DEFAULT_INDEX_FILE,
        strict_paths: bool = False,
    ):
        """
        Args:
            root_dir: Directory that relative request paths are read from.
            index_file: File served for "/" and the empty path.
            strict_paths: Re-validate paths after percent-decoding.
        """
        self.root_dir = Path(root_dir)
        self.index_file = index_file
        self.strict_paths = strict_paths

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Resolve, load and wrap the requested file.

        Returns:
            200 with the file bytes, 403 for rejected paths, 404 when
            nothing could be read.
        """
        try:
            path = resolve_path(
                request.raw_path,
                index_file=self.index_file,
                strict=self.strict_paths,
            )
        except UnsafePathError as e:
            logger.warning(str(e))
            return forbidden("Access denied")

        content = read_file(self.root_dir, path)
        if not content:
            logger.info(f"File not found: {path}")
            return not_found()

        logger.info(f"Served {path} ({len(content)} bytes)")
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .file(content, path)
            .build())
