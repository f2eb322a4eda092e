"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that knows about the HTTP wire format:

    request.py       Raw bytes → HTTPRequest (method + path)
    response.py      HTTPResponse → raw bytes, plus HTML error pages
    status_codes.py  Status codes and reason phrases
    mime_types.py    File extension → Content-Type

None of these modules touch sockets or the filesystem.

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    error_page,
    error_response,
    bad_request,
    forbidden,
    not_found,
    method_not_allowed,
    internal_error,
)
from .status_codes import HTTPStatus, STATUS_PHRASES, reason_phrase
from .mime_types import MIME_TYPES, DEFAULT_MIME_TYPE, get_mime_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "format_http_date",

    # Error pages
    "error_page",
    "error_response",
    "bad_request",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Status codes
    "HTTPStatus",
    "STATUS_PHRASES",
    "reason_phrase",

    # MIME types
    "MIME_TYPES",
    "DEFAULT_MIME_TYPE",
    "get_mime_type",
]
