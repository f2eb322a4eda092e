"""
Request handlers.

    static.py    Path resolution, file loading and the StaticFileHandler
"""

from .static import (
    StaticFileHandler,
    UnsafePathError,
    is_safe_path,
    percent_decode,
    resolve_path,
    read_file,
)

__all__ = [
    "StaticFileHandler",
    "UnsafePathError",
    "is_safe_path",
    "percent_decode",
    "resolve_path",
    "read_file",
]
