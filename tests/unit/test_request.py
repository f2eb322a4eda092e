"""
Unit tests for HTTP request parsing.
"""

import pytest

from staticserver.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    parse_request,
    first_line,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request)

        assert request.method == "GET"
        assert request.raw_path == "/"
        assert request.version == "HTTP/1.1"
        assert request.raw == sample_get_request

    def test_parse_head(self):
        """HEAD is accepted just like GET."""
        request = parse_request(b"HEAD /style.css HTTP/1.1\r\n\r\n")

        assert request.method == "HEAD"
        assert request.is_head
        assert request.raw_path == "/style.css"

    def test_header_block_stops_at_terminator(self, sample_get_request: bytes):
        request = parse_request(sample_get_request + b"ignored body")

        assert request.header_block.endswith(b"Accept: */*")
        assert b"ignored body" not in request.header_block

    def test_request_line(self, sample_get_request: bytes):
        request = parse_request(sample_get_request)
        assert request.request_line == "GET / HTTP/1.1"

    def test_path_stays_percent_encoded(self):
        """The parser does not decode; that is the resolver's job."""
        request = parse_request(b"GET /my%20file.txt HTTP/1.1\r\n\r\n")
        assert request.raw_path == "/my%20file.txt"

    def test_query_string_is_part_of_path(self):
        request = parse_request(b"GET /a.txt?x=1 HTTP/1.1\r\n\r\n")
        assert request.raw_path == "/a.txt?x=1"

    def test_version_is_not_interpreted(self):
        request = parse_request(b"GET /a.txt SOMETHING ELSE\r\n\r\n")

        assert request.raw_path == "/a.txt"
        assert request.version == "SOMETHING ELSE"

    def test_empty_path_between_spaces(self):
        request = parse_request(b"GET  HTTP/1.1\r\n\r\n")
        assert request.raw_path == ""

    def test_missing_header_terminator(self):
        """No blank line after the headers is a 400."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n")

        assert exc_info.value.status_code == 400

    def test_bare_lf_is_not_a_terminator(self):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET / HTTP/1.1\n\n")

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("raw", [
        b"GET\r\n\r\n",
        b"GET /index.html\r\n\r\n",
        b"\r\n\r\n",
    ])
    def test_missing_space_is_bad_request(self, raw: bytes):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("method", [b"POST", b"PUT", b"DELETE", b"get", b"OPTIONS"])
    def test_other_methods_not_allowed(self, method: bytes):
        """Anything except GET and HEAD is a 405, whatever the path."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(method + b" /index.html HTTP/1.1\r\n\r\n")

        assert exc_info.value.status_code == 405

    def test_method_checked_after_syntax(self):
        """A broken request line is a 400 even with a bad method."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"POST\r\n\r\n")

        assert exc_info.value.status_code == 400

    def test_unsafe_path_is_not_the_parsers_concern(self):
        request = parse_request(b"GET /../etc/passwd HTTP/1.1\r\n\r\n")
        assert request.raw_path == "/../etc/passwd"

    def test_non_utf8_bytes_survive(self):
        request = parse_request(b"GET /caf\xe9.txt HTTP/1.1\r\n\r\n")
        assert request.raw_path.encode("utf-8", "surrogateescape") == b"/caf\xe9.txt"


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_defaults(self):
        request = HTTPRequest(method="GET", raw_path="/")

        assert request.version == ""
        assert request.header_block == b""
        assert not request.is_head


def test_first_line():
    assert first_line(b"GET / HTTP/1.1\r\nHost: x") == b"GET / HTTP/1.1"
    assert first_line(b"no terminator") == b"no terminator"
