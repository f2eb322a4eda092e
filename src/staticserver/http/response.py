"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the bytes that go back over the socket.

=============================================================================
RESPONSE LAYOUT
=============================================================================

Every response has the same six headers, always in this order:

    HTTP/1.1 200 OK\r\n                          ← status line
    Server: StaticServer/1.0\r\n
    Date: Thu, 15 Jan 2026 12:30:45 GMT\r\n
    Content-Type: text/html\r\n
    Content-Length: 1234\r\n                     ← always len(body)
    Connection: close\r\n                        ← never keep-alive
    \r\n                                         ← end of headers
    <!DOCTYPE html>...                           ← body (if any)

Content-Length is computed from the body at serialization time, so it
can never disagree with what is actually sent.

=============================================================================
ERROR PAGES
=============================================================================

Every non-200 response carries a tiny HTML page naming the status:

    <title>404 Not Found</title>
    <h1>404 Not Found</h1>
    <p>Not Found</p>

No stack traces or internals ever reach the client.

=============================================================================
"""

import html
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from .mime_types import DEFAULT_MIME_TYPE, get_mime_type
from .status_codes import HTTPStatus, reason_phrase


DEFAULT_SERVER_NAME = "StaticServer/1.0"
HTML_CONTENT_TYPE = "text/html"


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 1123).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Thu, 15 Jan 2026 12:30:45 GMT

    Built by hand rather than with strftime, which is locale-dependent.

    Args:
        dt: Datetime to format (should be UTC).
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


@dataclass
class HTTPResponse:
    """
    A response waiting to be sent.

        HTTPResponse(status=200, content_type="text/css", body=b"...")
            │
            └──► to_bytes() ──► socket.sendall()
    """

    status: int = HTTPStatus.OK
    content_type: str = DEFAULT_MIME_TYPE
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def reason(self) -> str:
        return reason_phrase(self.status)

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 404 Not Found"."""
        return f"{self.version} {int(self.status)} {self.reason}"

    @property
    def content_length(self) -> int:
        return len(self.body)

    def header_lines(
        self,
        server_name: str = DEFAULT_SERVER_NAME,
        now: Optional[datetime] = None,
    ) -> list:
        """
        Return the header lines, in wire order, without line terminators.

        Args:
            server_name: Value of the Server header.
            now: Time for the Date header (defaults to the current UTC time).
        """
        now = now or datetime.now(timezone.utc)
        return [
            self.status_line,
            f"Server: {server_name}",
            f"Date: {format_http_date(now)}",
            f"Content-Type: {self.content_type}",
            f"Content-Length: {self.content_length}",
            "Connection: close",
        ]

    def to_bytes(
        self,
        server_name: str = DEFAULT_SERVER_NAME,
        now: Optional[datetime] = None,
    ) -> bytes:
        """
        Serialize the response for socket.sendall().

        Headers first, then a blank line, then the body if there is one.
        """
        lines = self.header_lines(server_name, now)
        head = "".join(f"{line}\r\n" for line in lines) + "\r\n"
        return head.encode("utf-8") + self.body


class ResponseBuilder:
    """
    Fluent builder for responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .file(content, "css/site.css")
            .build())

    Every setter returns self, so calls can be chained.
    """

    def __init__(self):
        self._status: int = HTTPStatus.OK
        self._content_type = DEFAULT_MIME_TYPE
        self._body = b""

    def status(self, status: int) -> "ResponseBuilder":
        self._status = status
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        self._content_type = content_type
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            # Lone surrogates (undecodable request bytes) become "?"
            self._body = body.encode("utf-8", errors="replace")
        else:
            self._body = body
        return self

    def html(self, text: str) -> "ResponseBuilder":
        self._content_type = HTML_CONTENT_TYPE
        return self.body(text)

    def file(self, content: bytes, path: str) -> "ResponseBuilder":
        """
        Set a file body, picking Content-Type from the path's extension.

        Args:
            content: File bytes.
            path: Path the bytes were read from (only the extension matters).
        """
        self._content_type = get_mime_type(path)
        return self.body(content)

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            content_type=self._content_type,
            body=self._body,
        )


# =============================================================================
# ERROR PAGE GENERATOR
# =============================================================================

def error_page(status: int, message: str) -> str:
    """
    Render the HTML body for an error response.

    Args:
        status: Status code (any integer; unknown codes read "Unknown").
        message: Short human-readable explanation. HTML-escaped.

    Returns:
        A complete, self-contained HTML document.
    """
    title = f"{int(status)} {reason_phrase(status)}"
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"<head><title>{title}</title></head>\n"
        "<body>\n"
        f"<h1>{title}</h1>\n"
        f"<p>{html.escape(message)}</p>\n"
        "</body>\n"
        "</html>\n"
    )


def error_response(status: int, message: str = "") -> HTTPResponse:
    """Build a text/html error response for the given status."""
    return (ResponseBuilder()
        .status(status)
        .html(error_page(status, message or reason_phrase(status)))
        .build())


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return error_response(HTTPStatus.BAD_REQUEST, message)


def forbidden(message: str = "Forbidden") -> HTTPResponse:
    return error_response(HTTPStatus.FORBIDDEN, message)


def not_found(message: str = "Not Found") -> HTTPResponse:
    return error_response(HTTPStatus.NOT_FOUND, message)


def method_not_allowed(message: str = "Method Not Allowed") -> HTTPResponse:
    return error_response(HTTPStatus.METHOD_NOT_ALLOWED, message)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
