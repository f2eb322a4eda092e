"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can answer with, and the reason
phrases that go on the status line.

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      └── Reason phrase (looked up here)
              └───────── Status code

=============================================================================
WHICH CODES, AND WHEN
=============================================================================

    200 OK                     File found and read
    400 Bad Request            No blank line after headers, or broken
                               request line
    403 Forbidden              Path contains "..", "//" or a backslash
    404 Not Found              File missing, unreadable or empty
    405 Method Not Allowed     Anything other than GET or HEAD
    500 Internal Server Error  Unexpected failure inside the pipeline

Any other code still gets a status line, with the phrase "Unknown".

=============================================================================
"""

from enum import IntEnum
from types import MappingProxyType


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase for this status code."""
        return reason_phrase(self)


# Fixed at import time and read-only afterwards; shared by every request.
STATUS_PHRASES = MappingProxyType({
    200: "OK",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
})

UNKNOWN_PHRASE = "Unknown"


def reason_phrase(status: int) -> str:
    """
    Get the reason phrase for a status code.

    Args:
        status: Any integer status code (HTTPStatus members included).

    Returns:
        The phrase from STATUS_PHRASES, or "Unknown".
    """
    return STATUS_PHRASES.get(int(status), UNKNOWN_PHRASE)
