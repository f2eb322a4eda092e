"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to Content-Type values.

The extension is everything from the LAST dot to the end of the path,
lowercased:

    "index.html"          → ".html"    → text/html
    "img/Logo.PNG"        → ".png"     → image/png
    "archive.tar.gz"      → ".gz"      → application/gzip
    "README"              → (none)     → application/octet-stream
    "v1.2/notes"          → ".2/notes" → application/octet-stream

Anything we don't recognise is sent as application/octet-stream, which
browsers treat as "download this, don't try to render it".

=============================================================================
"""

from types import MappingProxyType
from typing import Optional


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================
#
# Lowercase extension (with dot) → MIME type.
# Wrapped in MappingProxyType: the table is built once and never changes.
#
# =============================================================================

MIME_TYPES = MappingProxyType({
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".bmp": "image/bmp",

    # -------------------------------------------------------------------------
    # FONT TYPES
    # -------------------------------------------------------------------------
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # -------------------------------------------------------------------------
    # AUDIO / VIDEO
    # -------------------------------------------------------------------------
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",

    # -------------------------------------------------------------------------
    # DOCUMENTS / ARCHIVES
    # -------------------------------------------------------------------------
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".wasm": "application/wasm",
})

# "I don't know what this is, treat as binary"
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(path: str) -> str:
    """
    Return the lowercased extension of a path, including the dot.

    Everything from the last "." to the end is the extension, even if a
    "/" follows it. Returns "" when the path has no dot.
    """
    dot = path.rfind(".")
    if dot == -1:
        return ""
    return path[dot:].lower()


def get_mime_type(path: str, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Args:
        path: File path or name.
        default: Returned for missing/unknown extensions.
                 Uses application/octet-stream if not given.

    Returns:
        The MIME type string.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'
        >>> get_mime_type("PHOTO.JPG")
        'image/jpeg'
        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    return MIME_TYPES.get(get_extension(path), default or DEFAULT_MIME_TYPE)
