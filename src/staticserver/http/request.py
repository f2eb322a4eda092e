"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one socket read into an HTTPRequest.

This server only cares about TWO things in a request: the method and the
path. Every header is ignored, and there is never a body to read.

=============================================================================
WHAT WE LOOK AT
=============================================================================

    GET /docs/index.html HTTP/1.1\r\n      ← request line
    Host: localhost:8080\r\n               ┐
    User-Agent: curl/8.0\r\n               │ header block (ignored)
    \r\n                                   ┘ ← terminator must be present
    ─┬─ ───────┬──────── ───┬────
     │         │            └── version (ignored)
     │         └── path (between the first and second space)
     └── method (before the first space)

=============================================================================
PARSING RULES
=============================================================================

    1. No \r\n\r\n anywhere in the buffer      → 400 Bad Request
    2. Request line missing either space       → 400 Bad Request
    3. Method not exactly GET or HEAD          → 405 Method Not Allowed

HEAD is accepted but treated exactly like GET: the body is still sent.

The whole request must arrive in a single read. A request whose
terminator lands beyond the read buffer fails rule 1.

=============================================================================
"""

from dataclasses import dataclass, field

from .status_codes import HTTPStatus


HEADER_TERMINATOR = b"\r\n\r\n"
LINE_TERMINATOR = b"\r\n"

ALLOWED_METHODS = frozenset({"GET", "HEAD"})


class HTTPParseError(Exception):
    """
    Raised when a request cannot be served as sent.

    Carries the status code that should go back to the client:

        400 Bad Request         - Malformed request
        405 Method Not Allowed  - Method other than GET/HEAD
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


def decode_wire(data: bytes) -> str:
    """
    Decode bytes from the wire into a str without losing any of them.

    surrogateescape keeps invalid UTF-8 as lone surrogates, which
    os.fsencode() turns back into the exact original bytes.
    """
    return data.decode("utf-8", errors="surrogateescape")


def first_line(data: bytes) -> bytes:
    """Return everything up to the first CRLF (or all of data)."""
    end = data.find(LINE_TERMINATOR)
    return data if end == -1 else data[:end]


@dataclass
class HTTPRequest:
    """
    A parsed request.

    Attributes:
        method:       "GET" or "HEAD".
        raw_path:     Path exactly as sent, still percent-encoded.
        version:      Whatever followed the second space (not interpreted).
        header_block: Bytes before the \\r\\n\\r\\n terminator.
        raw:          The original read buffer.
    """

    method: str
    raw_path: str
    version: str = ""
    header_block: bytes = field(default=b"", repr=False)
    raw: bytes = field(default=b"", repr=False)

    @property
    def request_line(self) -> str:
        """The first line of the request, for logging."""
        return decode_wire(first_line(self.header_block))

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"


class RequestParser:
    """
    Parser for the request line of a single-read HTTP request.

    Usage:
        parser = RequestParser()
        try:
            request = parser.parse(data)
        except HTTPParseError as e:
            send_error(e.status_code, str(e))
    """

    def __init__(self, allowed_methods=ALLOWED_METHODS):
        self.allowed_methods = frozenset(allowed_methods)

    def parse(self, data: bytes) -> HTTPRequest:
        """
        Parse raw request bytes.

        Args:
            data: The bytes from one socket read.

        Returns:
            HTTPRequest with method and raw path filled in.

        Raises:
            HTTPParseError: 400 for malformed requests, 405 for methods
                            other than GET/HEAD.
        """
        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Find the end of the header block
        # ─────────────────────────────────────────────────────────────────
        header_end = data.find(HEADER_TERMINATOR)
        if header_end == -1:
            raise HTTPParseError("Malformed request: no header terminator")

        header_block = data[:header_end]

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Split the request line on its first two spaces
        # ─────────────────────────────────────────────────────────────────
        #   "GET /a.txt HTTP/1.1"
        #       ^      ^
        #   method_end  path_end
        request_line = decode_wire(first_line(header_block))

        method_end = request_line.find(" ")
        if method_end == -1:
            raise HTTPParseError("Malformed request line")

        path_end = request_line.find(" ", method_end + 1)
        if path_end == -1:
            raise HTTPParseError("Malformed request line")

        method = request_line[:method_end]
        raw_path = request_line[method_end + 1:path_end]
        version = request_line[path_end + 1:]

        # ─────────────────────────────────────────────────────────────────
        # STEP 3: Only GET and HEAD are served
        # ─────────────────────────────────────────────────────────────────
        if method not in self.allowed_methods:
            raise HTTPParseError(
                f"Method not allowed: {method}",
                status_code=HTTPStatus.METHOD_NOT_ALLOWED,
            )

        return HTTPRequest(
            method=method,
            raw_path=raw_path,
            version=version,
            header_block=header_block,
            raw=data,
        )


def parse_request(data: bytes) -> HTTPRequest:
    """Parse with a default RequestParser."""
    return RequestParser().parse(data)
